"""Upload collaborator that keeps images on the local disk."""

import logging
from dataclasses import dataclass
from pathlib import Path

from lechabo.adapters.object_paths import object_path
from lechabo.errors import BackendUnavailable
from lechabo.services.facade import FileUploader

logger = logging.getLogger(__name__)


@dataclass
class LocalFileUploader(FileUploader):
    """Writes uploads under a root directory and returns ``file://`` URIs."""

    root: Path

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        uploader_username: str,
    ) -> str:
        """Write the bytes to a fresh path and return its URI."""
        target = self.root / object_path(uploader_username, filename)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as exc:
            logger.exception("Failed to store upload %s", target)
            raise BackendUnavailable(f"Cannot store upload at {target}") from exc
        return target.resolve().as_uri()
