"""Upload collaborator backed by Supabase Storage."""

import logging
from dataclasses import dataclass

import httpx
from storage3.utils import StorageException
from supabase import AsyncClient

from lechabo.adapters.object_paths import object_path
from lechabo.errors import BackendUnavailable
from lechabo.services.facade import FileUploader

logger = logging.getLogger(__name__)


@dataclass
class SupabaseFileUploader(FileUploader):
    """Uploads into a public bucket and returns the object's public URL."""

    client: AsyncClient
    bucket: str = "photos"

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        uploader_username: str,
    ) -> str:
        """Upload the bytes and resolve their public URL."""
        path = object_path(uploader_username, filename)
        bucket = self.client.storage.from_(self.bucket)
        try:
            await bucket.upload(
                path=path,
                file=content,
                file_options={"content-type": content_type},
            )
            return await bucket.get_public_url(path)
        except (StorageException, httpx.HTTPError) as exc:
            logger.exception("Supabase storage upload of %s failed", path)
            raise BackendUnavailable(f"Upload of {path} failed") from exc
