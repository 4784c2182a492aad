"""Tests for the local storage adapters."""

import asyncio
from pathlib import Path

import pytest

from lechabo.adapters.local_file_uploader import LocalFileUploader
from lechabo.adapters.local_record_store import LocalRecordStore
from lechabo.domain.collections import PHOTOS, USERS
from lechabo.errors import BackendUnavailable, NotFound
from lechabo.services.photos import PhotoService
from tests.conftest import ScriptedClock


def _photo_row(photo_id: str, created_at: str) -> dict[str, object]:
    return {
        "id": photo_id,
        "uploader_username": "alice",
        "stored_file_ref": "ref",
        "title": photo_id,
        "tags": "",
        "description": "",
        "likes": [],
        "created_at": created_at,
    }


def test_insert_and_find_one(tmp_path: Path) -> None:
    store = LocalRecordStore.create(tmp_path)
    row = {"id": "u1", "username": "alice"}

    stored = asyncio.run(store.insert(USERS, row))

    assert stored == row
    assert asyncio.run(store.find_one(USERS, {"username": "alice"})) == row
    assert asyncio.run(store.find_one(USERS, {"username": "Alice"})) is None


def test_records_persist_across_instances(tmp_path: Path) -> None:
    asyncio.run(LocalRecordStore.create(tmp_path).insert(USERS, {"id": "u1"}))

    rows = asyncio.run(LocalRecordStore.create(tmp_path).list_all(USERS))

    assert rows == [{"id": "u1"}]


def test_list_all_returns_snapshot(tmp_path: Path) -> None:
    store = LocalRecordStore.create(tmp_path)
    asyncio.run(store.insert(PHOTOS, _photo_row("p1", "2024-01-01T00:00:00.000000+00:00")))

    snapshot = asyncio.run(store.list_all(PHOTOS))
    snapshot[0]["likes"].append("mallory")

    assert asyncio.run(store.list_all(PHOTOS))[0]["likes"] == []


def test_list_all_sorts_explicitly(tmp_path: Path) -> None:
    store = LocalRecordStore.create(tmp_path)
    for photo_id, created_at in [
        ("middle", "2024-01-02T00:00:00.000000+00:00"),
        ("newest", "2024-01-03T00:00:00.000000+00:00"),
        ("oldest", "2024-01-01T00:00:00.000000+00:00"),
    ]:
        asyncio.run(store.insert(PHOTOS, _photo_row(photo_id, created_at)))

    rows = asyncio.run(store.list_all(PHOTOS, order_by="created_at", descending=True))

    assert [row["id"] for row in rows] == ["newest", "middle", "oldest"]


def test_update_merges_patch(tmp_path: Path) -> None:
    store = LocalRecordStore.create(tmp_path)
    asyncio.run(store.insert(PHOTOS, _photo_row("p1", "2024-01-01T00:00:00.000000+00:00")))

    asyncio.run(store.update(PHOTOS, "p1", {"likes": ["bob"]}))

    row = asyncio.run(store.find_one(PHOTOS, {"id": "p1"}))
    assert row["likes"] == ["bob"]
    assert row["title"] == "p1"


def test_update_missing_record(tmp_path: Path) -> None:
    store = LocalRecordStore.create(tmp_path)

    with pytest.raises(NotFound):
        asyncio.run(store.update(PHOTOS, "nope", {"likes": []}))


def test_insert_rejects_unknown_fields_and_missing_id(tmp_path: Path) -> None:
    store = LocalRecordStore.create(tmp_path)

    with pytest.raises(BackendUnavailable):
        asyncio.run(store.insert(USERS, {"id": "u1", "password": "x"}))
    with pytest.raises(BackendUnavailable):
        asyncio.run(store.insert(USERS, {"username": "alice"}))


def test_corrupt_records_file_is_backend_unavailable(tmp_path: Path) -> None:
    (tmp_path / "records.json").write_text("[1, 2", encoding="utf-8")
    store = LocalRecordStore.create(tmp_path)

    with pytest.raises(BackendUnavailable):
        asyncio.run(store.list_all(USERS))


def test_photo_service_over_local_store(tmp_path: Path) -> None:
    service = PhotoService(LocalRecordStore.create(tmp_path), clock=ScriptedClock())
    photo = asyncio.run(service.create_photo("alice", "ref", "Sunset"))

    asyncio.run(service.toggle_like(photo.id, "bob"))
    reopened = PhotoService(LocalRecordStore.create(tmp_path), clock=ScriptedClock())

    assert asyncio.run(reopened.get_photo(photo.id)).likes == {"bob"}


def test_local_file_uploader_writes_file(tmp_path: Path) -> None:
    uploader = LocalFileUploader(tmp_path / "uploads")

    ref = asyncio.run(uploader.upload(b"png-bytes", "cat.PNG", "image/png", "al/ice"))

    assert ref.startswith("file://")
    assert ref.endswith(".png")
    written = list((tmp_path / "uploads" / "al%2Fice").iterdir())
    assert [path.read_bytes() for path in written] == [b"png-bytes"]
