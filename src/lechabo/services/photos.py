"""Photo records and like toggling."""

import logging
from dataclasses import dataclass, field
from uuid import uuid4

from lechabo.domain.collections import PHOTOS
from lechabo.domain.models import Photo, ProfileSummary
from lechabo.errors import NotFound, ValidationError
from lechabo.services.clock import (
    Clock,
    MonotonicUtcClock,
    format_timestamp,
    parse_timestamp,
)
from lechabo.services.records import Record, RecordStore

logger = logging.getLogger(__name__)


@dataclass
class PhotoService:
    """Creates and lists photos and applies like toggles."""

    store: RecordStore
    clock: Clock = field(default_factory=MonotonicUtcClock)

    async def create_photo(  # noqa: PLR0913
        self,
        uploader_username: str,
        stored_file_ref: str,
        title: str,
        tags: str | None = None,
        description: str | None = None,
    ) -> Photo:
        """Persist a new photo with an empty like set."""
        validate_title(title)
        photo = Photo(
            id=str(uuid4()),
            uploader_username=uploader_username,
            stored_file_ref=stored_file_ref,
            title=title,
            tags=tags or "",
            description=description or "",
            likes=frozenset(),
            created_at=self.clock.now(),
        )
        await self.store.insert(PHOTOS, _to_row(photo))
        logger.info("Stored photo %s by %r", photo.id, uploader_username)
        return photo

    async def get_photo(self, photo_id: str) -> Photo:
        """Return a photo by id or raise NotFound."""
        row = await self.store.find_one(PHOTOS, {"id": photo_id})
        if row is None:
            raise NotFound(f"No photo {photo_id}")
        return _parse_photo(row)

    async def list_photos(self) -> list[Photo]:
        """Return every photo, newest first."""
        rows = await self.store.list_all(PHOTOS, order_by="created_at", descending=True)
        return [_parse_photo(row) for row in rows]

    async def list_photos_by_uploader(self, username: str) -> list[Photo]:
        """Return the photos uploaded by a user, newest first."""
        rows = await self.store.list_where(
            PHOTOS,
            {"uploader_username": username},
            order_by="created_at",
            descending=True,
        )
        return [_parse_photo(row) for row in rows]

    async def profile_summary(self, username: str) -> ProfileSummary:
        """Count a user's uploads and the likes they received."""
        photos = await self.list_photos_by_uploader(username)
        return ProfileSummary(
            username=username,
            photo_count=len(photos),
            total_likes=sum(len(photo.likes) for photo in photos),
        )

    async def toggle_like(self, photo_id: str, username: str) -> Photo:
        """Add or remove a username from a photo's like set.

        Reads the current set and writes the whole new set back, so two
        sessions toggling the same photo concurrently can lose an update.
        """
        photo = await self.get_photo(photo_id)
        likes = toggle_membership(photo.likes, username)
        await self.store.update(PHOTOS, photo_id, {"likes": sorted(likes)})
        updated = Photo(
            id=photo.id,
            uploader_username=photo.uploader_username,
            stored_file_ref=photo.stored_file_ref,
            title=photo.title,
            tags=photo.tags,
            description=photo.description,
            likes=likes,
            created_at=photo.created_at,
        )
        logger.info(
            "%s %r on photo %s",
            "Like" if updated.is_liked_by(username) else "Unlike",
            username,
            photo_id,
        )
        return updated


def validate_title(title: str) -> None:
    """Reject a missing or blank photo title."""
    if not title or not title.strip():
        raise ValidationError("Photo title must not be blank")


def toggle_membership(likes: frozenset[str], username: str) -> frozenset[str]:
    """Remove the username if present, add it otherwise."""
    if username in likes:
        return likes - {username}
    return likes | {username}


def _to_row(photo: Photo) -> Record:
    return {
        "id": photo.id,
        "uploader_username": photo.uploader_username,
        "stored_file_ref": photo.stored_file_ref,
        "title": photo.title,
        "tags": photo.tags,
        "description": photo.description,
        "likes": sorted(photo.likes),
        "created_at": format_timestamp(photo.created_at),
    }


def _parse_photo(row: Record) -> Photo:
    """Parse a photos row into a domain model."""
    raw_likes = row.get("likes") or []
    return Photo(
        id=str(row["id"]),
        uploader_username=str(row["uploader_username"]),
        stored_file_ref=str(row["stored_file_ref"]),
        title=str(row["title"]),
        tags=str(row.get("tags") or ""),
        description=str(row.get("description") or ""),
        likes=frozenset(str(name) for name in raw_likes),  # type: ignore[union-attr]
        created_at=parse_timestamp(row["created_at"]),
    )
