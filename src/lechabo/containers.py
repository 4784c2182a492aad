"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import AsyncClient, acreate_client

from lechabo.adapters.local_file_store import JsonDocumentFile
from lechabo.adapters.local_file_uploader import LocalFileUploader
from lechabo.adapters.local_record_store import LocalRecordStore
from lechabo.adapters.supabase_file_uploader import SupabaseFileUploader
from lechabo.adapters.supabase_record_store import SupabaseRecordStore
from lechabo.app_logging import configure_logging
from lechabo.config import Settings, require_supabase_credentials
from lechabo.services.clock import MonotonicUtcClock
from lechabo.services.facade import DataAccessFacade, FileUploader
from lechabo.services.identity import IdentityService
from lechabo.services.photos import PhotoService
from lechabo.services.records import RecordStore
from lechabo.services.secrets import (
    BcryptSecretHasher,
    PlaintextSecretHasher,
    SecretHasher,
)
from lechabo.services.session import SessionHolder

logger = logging.getLogger(__name__)

SESSION_FILENAME = "session.json"
UPLOADS_DIRNAME = "uploads"


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    record_store: RecordStore
    facade: DataAccessFacade
    close_resources: Callable[[], Awaitable[None]]


async def close_supabase_client(client: AsyncClient) -> None:
    """Release the HTTP sessions of the database and storage clients."""
    await client.postgrest.aclose()
    await client.storage.aclose()


async def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the container, choosing the storage backend once.

    Raises ``ConfigurationError`` when the Supabase backend is selected
    without usable credentials.
    """
    configure_logging()
    resolved_settings = settings or Settings()
    data_dir = resolved_settings.data_dir

    record_store: RecordStore
    uploader: FileUploader
    if resolved_settings.storage_backend == "supabase":
        url, key = require_supabase_credentials(resolved_settings)
        supabase_client = await acreate_client(url, key)
        record_store = SupabaseRecordStore(supabase_client)
        uploader = SupabaseFileUploader(
            supabase_client, bucket=resolved_settings.supabase_photo_bucket
        )

        async def close_resources() -> None:
            await close_supabase_client(supabase_client)

    else:
        record_store = LocalRecordStore.create(data_dir)
        uploader = LocalFileUploader(data_dir / UPLOADS_DIRNAME)

        async def close_resources() -> None:
            return None

    hasher: SecretHasher
    if resolved_settings.store_plaintext_secrets:
        logger.warning("Secrets are stored verbatim (store_plaintext_secrets=true)")
        hasher = PlaintextSecretHasher()
    else:
        hasher = BcryptSecretHasher()

    clock = MonotonicUtcClock()
    facade = DataAccessFacade(
        identity=IdentityService(record_store, hasher=hasher, clock=clock),
        photos=PhotoService(record_store, clock=clock),
        session=SessionHolder(JsonDocumentFile(data_dir / SESSION_FILENAME)),
        uploader=uploader,
    )
    logger.info("Using %s storage backend", resolved_settings.storage_backend)
    return AppContainer(
        settings=resolved_settings,
        record_store=record_store,
        facade=facade,
        close_resources=close_resources,
    )
