"""Single entry point for the UI collaborator."""

import logging
from dataclasses import dataclass
from typing import Protocol

from lechabo.domain.models import Photo, ProfileSummary, RecoveryQuestion, User
from lechabo.errors import ValidationError
from lechabo.services.identity import IdentityService
from lechabo.services.photos import PhotoService, validate_title
from lechabo.services.session import SessionHolder

logger = logging.getLogger(__name__)


class FileUploader(Protocol):
    """Transfers an image and returns a stable, publicly resolvable reference."""

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        uploader_username: str,
    ) -> str:
        """Store the file and return its reference."""


@dataclass
class DataAccessFacade:
    """Identity, photo and session operations behind one surface.

    Successful signup, login and recovery all mark the account active on this
    device; ``log_out`` clears it.
    """

    identity: IdentityService
    photos: PhotoService
    session: SessionHolder
    uploader: FileUploader

    async def sign_up(
        self,
        username: str,
        secret: str,
        question: RecoveryQuestion | str,
        answer_secret: str,
    ) -> User:
        """Register an account and start a session.

        If the session cannot be stored the account still exists and
        ``BackendUnavailable`` is raised; ``log_in`` then completes the flow.
        """
        user = await self.identity.create_user(
            username, secret, question, answer_secret
        )
        self.session.set_active(user)
        return user

    async def log_in(self, username: str, secret: str) -> User:
        """Authenticate and start a session.

        On a wrong secret for a known account the raised ``AuthError`` carries
        the recovery question; the next step is ``recover_account``.
        """
        user = await self.identity.authenticate(username, secret)
        self.session.set_active(user)
        return user

    async def recover_account(self, username: str, answer_secret: str) -> User:
        """Grant access through the recovery answer and start a session."""
        user = await self.identity.recover_account(username, answer_secret)
        self.session.set_active(user)
        return user

    async def find_user(self, username: str) -> User | None:
        return await self.identity.find_by_username(username)

    def current_user(self) -> User | None:
        """Return the account restored from this device, if any."""
        return self.session.get_active()

    def log_out(self) -> None:
        self.session.clear_active()

    async def create_photo(  # noqa: PLR0913
        self,
        uploader_username: str,
        stored_file_ref: str,
        title: str,
        tags: str | None = None,
        description: str | None = None,
    ) -> Photo:
        return await self.photos.create_photo(
            uploader_username, stored_file_ref, title, tags, description
        )

    async def upload_photo(  # noqa: PLR0913
        self,
        content: bytes,
        filename: str,
        content_type: str,
        uploader_username: str,
        title: str,
        tags: str | None = None,
        description: str | None = None,
    ) -> Photo:
        """Transfer an image through the uploader and record it.

        Input is validated before any bytes are transferred.
        """
        validate_title(title)
        if not content_type.startswith("image/"):
            raise ValidationError(f"Unsupported content type {content_type!r}")
        if not content:
            raise ValidationError("Uploaded file is empty")
        stored_file_ref = await self.uploader.upload(
            content, filename, content_type, uploader_username
        )
        logger.info("Uploaded %r for %r", filename, uploader_username)
        return await self.photos.create_photo(
            uploader_username, stored_file_ref, title, tags, description
        )

    async def list_photos(self) -> list[Photo]:
        return await self.photos.list_photos()

    async def list_photos_by_uploader(self, username: str) -> list[Photo]:
        return await self.photos.list_photos_by_uploader(username)

    async def profile_summary(self, username: str) -> ProfileSummary:
        return await self.photos.profile_summary(username)

    async def toggle_like(self, photo_id: str, username: str) -> Photo:
        return await self.photos.toggle_like(photo_id, username)
