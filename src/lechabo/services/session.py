"""Device-local record of the signed-in account."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from lechabo.domain.models import RecoveryQuestion, User
from lechabo.errors import BackendUnavailable
from lechabo.services.clock import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


class SessionSlot(Protocol):
    """Device-local storage for a single JSON object."""

    path: Path

    def read(self) -> dict[str, object] | None:
        """Return the stored object, or None when empty."""

    def write(self, payload: dict[str, object]) -> None:
        """Replace the stored object."""

    def delete(self) -> None:
        """Empty the slot."""


@dataclass
class SessionHolder:
    """Remembers which account is active on this device.

    There is no token and no expiry: a stored account means logged in, and
    ``clear_active`` is the only way to log out.
    """

    slot: SessionSlot

    def set_active(self, user: User) -> None:
        """Persist the account as the active one."""
        try:
            self.slot.write({"user": _user_to_payload(user)})
        except OSError as exc:
            logger.exception("Failed to write session slot %s", self.slot.path)
            raise BackendUnavailable(
                f"Cannot write session to {self.slot.path}"
            ) from exc

    def get_active(self) -> User | None:
        """Return the active account, or None when logged out."""
        try:
            payload = self.slot.read()
        except (OSError, ValueError):
            logger.warning("Session slot at %s is unreadable", self.slot.path)
            return None
        if not payload or not isinstance(payload.get("user"), dict):
            return None
        try:
            return _parse_user(payload["user"])  # type: ignore[arg-type]
        except (KeyError, TypeError, ValueError):
            logger.warning("Session slot at %s is malformed", self.slot.path)
            return None

    def clear_active(self) -> None:
        """Forget the active account."""
        try:
            self.slot.delete()
        except OSError as exc:
            logger.exception("Failed to clear session slot %s", self.slot.path)
            raise BackendUnavailable(
                f"Cannot clear session at {self.slot.path}"
            ) from exc


def _user_to_payload(user: User) -> dict[str, object]:
    return {
        "id": user.id,
        "username": user.username,
        "recovery_question": user.recovery_question.value,
        "avatar_ref": user.avatar_ref,
        "created_at": format_timestamp(user.created_at),
    }


def _parse_user(payload: dict[str, object]) -> User:
    return User(
        id=str(payload["id"]),
        username=str(payload["username"]),
        recovery_question=RecoveryQuestion(payload["recovery_question"]),
        avatar_ref=str(payload["avatar_ref"]),
        created_at=parse_timestamp(payload["created_at"]),
    )
