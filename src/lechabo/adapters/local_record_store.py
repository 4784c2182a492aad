"""Embedded record store backed by a local JSON file."""

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from lechabo.adapters.local_file_store import JsonDocumentFile
from lechabo.domain.collections import Collection
from lechabo.errors import BackendUnavailable, NotFound
from lechabo.services.records import Record, RecordStore

logger = logging.getLogger(__name__)

RECORDS_FILENAME = "records.json"


@dataclass
class LocalRecordStore(RecordStore):
    """Single-device store keeping every collection in one JSON document.

    The document maps collection name to record id to record. Every call
    reads the file and every mutation rewrites it, so separate instances over
    the same path observe each other's writes. Uniqueness is not enforced.
    """

    document: JsonDocumentFile

    @classmethod
    def create(cls, data_dir: Path) -> "LocalRecordStore":
        """Create a store rooted in the given data directory."""
        return cls(document=JsonDocumentFile(data_dir / RECORDS_FILENAME))

    async def insert(self, collection: Collection, record: Record) -> Record:
        """Store the record as supplied and return a copy."""
        unknown = set(record) - set(collection.fields)
        if unknown:
            raise BackendUnavailable(
                f"Unknown fields for {collection.name}: {sorted(unknown)}"
            )
        record_id = record.get(collection.id_field)
        if not isinstance(record_id, str) or not record_id:
            raise BackendUnavailable(f"Record for {collection.name} has no id")

        document = self._load()
        table = document.setdefault(collection.name, {})
        if record_id in table:
            raise BackendUnavailable(
                f"Record {record_id} already exists in {collection.name}"
            )
        table[record_id] = copy.deepcopy(record)
        self._save(document)
        return copy.deepcopy(record)

    async def list_all(
        self,
        collection: Collection,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Record]:
        """Return copies of every record, sorted when a field is given."""
        return self._select(collection, {}, order_by, descending)

    async def find_one(
        self, collection: Collection, predicate: Mapping[str, object]
    ) -> Record | None:
        """Return the first record matching every predicate value."""
        matches = self._select(collection, predicate, None, False)
        return matches[0] if matches else None

    async def list_where(
        self,
        collection: Collection,
        predicate: Mapping[str, object],
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Record]:
        """Return copies of matching records, sorted when a field is given."""
        return self._select(collection, predicate, order_by, descending)

    async def update(
        self, collection: Collection, record_id: str, patch: Mapping[str, object]
    ) -> None:
        """Merge the patch into the record with the given id."""
        document = self._load()
        table = document.get(collection.name, {})
        current = table.get(record_id)
        if current is None:
            raise NotFound(f"No record {record_id} in {collection.name}")
        current.update(copy.deepcopy(dict(patch)))
        self._save(document)

    def _select(
        self,
        collection: Collection,
        predicate: Mapping[str, object],
        order_by: str | None,
        descending: bool,
    ) -> list[Record]:
        table = self._load().get(collection.name, {})
        rows = [
            row
            for row in table.values()
            if all(row.get(key) == value for key, value in predicate.items())
        ]
        if order_by is not None:
            # Dict order follows insertion; sort explicitly on the field.
            rows.sort(key=lambda row: str(row.get(order_by, "")), reverse=descending)
        return copy.deepcopy(rows)

    def _load(self) -> dict[str, dict[str, Record]]:
        try:
            payload = self.document.read()
        except (OSError, ValueError) as exc:
            logger.exception("Failed to read local records")
            raise BackendUnavailable(
                f"Cannot read records from {self.document.path}"
            ) from exc
        return payload or {}  # type: ignore[return-value]

    def _save(self, document: dict[str, dict[str, Record]]) -> None:
        try:
            self.document.write(document)  # type: ignore[arg-type]
        except (OSError, TypeError, ValueError) as exc:
            logger.exception("Failed to write local records")
            raise BackendUnavailable(
                f"Cannot write records to {self.document.path}"
            ) from exc
