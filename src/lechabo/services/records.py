"""Backend-agnostic record persistence contract."""

from collections.abc import Mapping
from typing import Protocol

from lechabo.domain.collections import Collection

Record = dict[str, object]


class RecordStore(Protocol):
    """Keyed persistence for named collections of records.

    Implementations may complete synchronously but are always awaited, so
    callers never depend on which backend is active.
    """

    async def insert(self, collection: Collection, record: Record) -> Record:
        """Store the record exactly as supplied and return the stored copy."""

    async def list_all(
        self,
        collection: Collection,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Record]:
        """Return a snapshot of every record, optionally ordered by a field."""

    async def find_one(
        self, collection: Collection, predicate: Mapping[str, object]
    ) -> Record | None:
        """Return the first record whose fields equal every predicate value."""

    async def list_where(
        self,
        collection: Collection,
        predicate: Mapping[str, object],
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Record]:
        """Return every record whose fields equal every predicate value."""

    async def update(
        self, collection: Collection, record_id: str, patch: Mapping[str, object]
    ) -> None:
        """Merge the patch into an existing record; raise NotFound if absent."""
