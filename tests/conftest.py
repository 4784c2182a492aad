"""Shared test fixtures."""

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from lechabo.adapters.local_file_store import JsonDocumentFile
from lechabo.config import Settings
from lechabo.domain.collections import Collection
from lechabo.errors import NotFound
from lechabo.services.clock import Clock
from lechabo.services.facade import DataAccessFacade, FileUploader
from lechabo.services.identity import IdentityService
from lechabo.services.photos import PhotoService
from lechabo.services.records import Record, RecordStore
from lechabo.services.secrets import BcryptSecretHasher
from lechabo.services.session import SessionHolder

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@dataclass
class InMemoryRecordStore(RecordStore):
    """In-memory record store for tests."""

    tables: dict[str, dict[str, Record]] = field(default_factory=dict)
    inserts: list[tuple[str, Record]] = field(default_factory=list)

    async def insert(self, collection: Collection, record: Record) -> Record:
        stored = copy.deepcopy(record)
        self.tables.setdefault(collection.name, {})[str(record["id"])] = stored
        self.inserts.append((collection.name, stored))
        return copy.deepcopy(stored)

    async def list_all(
        self,
        collection: Collection,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Record]:
        return await self.list_where(collection, {}, order_by, descending)

    async def find_one(
        self, collection: Collection, predicate: Mapping[str, object]
    ) -> Record | None:
        rows = await self.list_where(collection, predicate)
        return rows[0] if rows else None

    async def list_where(
        self,
        collection: Collection,
        predicate: Mapping[str, object],
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Record]:
        rows = [
            copy.deepcopy(row)
            for row in self.tables.get(collection.name, {}).values()
            if all(row.get(key) == value for key, value in predicate.items())
        ]
        if order_by:
            rows.sort(key=lambda row: str(row[order_by]), reverse=descending)
        return rows

    async def update(
        self, collection: Collection, record_id: str, patch: Mapping[str, object]
    ) -> None:
        table = self.tables.get(collection.name, {})
        if record_id not in table:
            raise NotFound(record_id)
        table[record_id].update(copy.deepcopy(dict(patch)))


@dataclass
class ScriptedClock(Clock):
    """Clock returning preset times, then stepping a second at a time."""

    times: list[datetime] = field(default_factory=list)
    current: datetime = T0

    def now(self) -> datetime:
        if self.times:
            return self.times.pop(0)
        self.current += timedelta(seconds=1)
        return self.current

    @classmethod
    def of(cls, times: Iterable[datetime]) -> "ScriptedClock":
        return cls(times=list(times))


@dataclass
class FakeUploader(FileUploader):
    """Fake uploader that records calls and returns a fake URL."""

    uploads: list[dict[str, object]] = field(default_factory=list)

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        uploader_username: str,
    ) -> str:
        self.uploads.append(
            {
                "content": content,
                "filename": filename,
                "content_type": content_type,
                "uploader_username": uploader_username,
            }
        )
        return f"https://files.example.com/{uploader_username}/{filename}"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(storage_backend="local", data_dir=tmp_path / "data")


@pytest.fixture
def hasher() -> BcryptSecretHasher:
    return BcryptSecretHasher(rounds=4)


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def clock() -> ScriptedClock:
    return ScriptedClock()


@pytest.fixture
def identity_service(
    record_store: InMemoryRecordStore,
    hasher: BcryptSecretHasher,
    clock: ScriptedClock,
) -> IdentityService:
    return IdentityService(record_store, hasher=hasher, clock=clock)


@pytest.fixture
def photo_service(
    record_store: InMemoryRecordStore, clock: ScriptedClock
) -> PhotoService:
    return PhotoService(record_store, clock=clock)


@pytest.fixture
def session_holder(tmp_path: Path) -> SessionHolder:
    return SessionHolder(JsonDocumentFile(tmp_path / "session.json"))


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def facade(
    identity_service: IdentityService,
    photo_service: PhotoService,
    session_holder: SessionHolder,
    uploader: FakeUploader,
) -> DataAccessFacade:
    return DataAccessFacade(
        identity=identity_service,
        photos=photo_service,
        session=session_holder,
        uploader=uploader,
    )
