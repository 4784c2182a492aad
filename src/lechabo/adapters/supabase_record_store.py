"""Remote record store backed by Supabase."""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient

from lechabo.domain.collections import Collection
from lechabo.errors import BackendUnavailable, ConflictError, NotFound
from lechabo.services.records import Record, RecordStore

logger = logging.getLogger(__name__)

_UNIQUE_VIOLATION = "23505"


@contextmanager
def _backend_errors(action: str) -> Iterator[None]:
    """Translate PostgREST and transport failures into domain errors."""
    try:
        yield
    except APIError as exc:
        if exc.code == _UNIQUE_VIOLATION:
            raise ConflictError(f"Supabase rejected {action}: {exc.message}") from exc
        logger.exception("Supabase %s failed", action)
        raise BackendUnavailable(f"Supabase {action} failed: {exc.message}") from exc
    except httpx.HTTPError as exc:
        logger.exception("Supabase %s failed", action)
        raise BackendUnavailable(f"Supabase {action} failed") from exc


@dataclass
class SupabaseRecordStore(RecordStore):
    """Supabase implementation shared across devices.

    Ordering is delegated to PostgREST and uniqueness to table constraints.
    """

    client: AsyncClient

    async def insert(self, collection: Collection, record: Record) -> Record:
        """Insert a row and return it as stored."""
        with _backend_errors(f"insert into {collection.name}"):
            response = await self.client.table(collection.name).insert(record).execute()
        if not response.data:
            raise BackendUnavailable(f"Failed to insert into {collection.name}")
        return dict(response.data[0])

    async def list_all(
        self,
        collection: Collection,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Record]:
        """Return every row, ordered by the query layer when requested."""
        return await self.list_where(collection, {}, order_by, descending)

    async def find_one(
        self, collection: Collection, predicate: Mapping[str, object]
    ) -> Record | None:
        """Return the first row matching every predicate value."""
        query = self.client.table(collection.name).select(", ".join(collection.fields))
        for column, value in predicate.items():
            query = query.eq(column, value)
        with _backend_errors(f"lookup in {collection.name}"):
            response = await query.limit(1).execute()
        if not response.data:
            return None
        return dict(response.data[0])

    async def list_where(
        self,
        collection: Collection,
        predicate: Mapping[str, object],
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Record]:
        """Return rows matching every predicate value."""
        query = self.client.table(collection.name).select(", ".join(collection.fields))
        for column, value in predicate.items():
            query = query.eq(column, value)
        if order_by is not None:
            query = query.order(order_by, desc=descending)
        with _backend_errors(f"select from {collection.name}"):
            response = await query.execute()
        return [dict(row) for row in response.data or []]

    async def update(
        self, collection: Collection, record_id: str, patch: Mapping[str, object]
    ) -> None:
        """Update a row by id; an empty result means the id does not exist."""
        with _backend_errors(f"update of {collection.name}"):
            response = (
                await self.client.table(collection.name)
                .update(dict(patch))
                .eq(collection.id_field, record_id)
                .execute()
            )
        if not response.data:
            raise NotFound(f"No record {record_id} in {collection.name}")
