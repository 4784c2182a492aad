"""Account creation, login and security-question recovery."""

import asyncio
import logging
from dataclasses import dataclass, field
from urllib.parse import quote
from uuid import uuid4

from lechabo.domain.collections import USERS
from lechabo.domain.models import RecoveryQuestion, User, UserRecord
from lechabo.errors import AuthError, ConflictError, RecoveryError, ValidationError
from lechabo.services.clock import (
    Clock,
    MonotonicUtcClock,
    format_timestamp,
    parse_timestamp,
)
from lechabo.services.records import Record, RecordStore
from lechabo.services.secrets import BcryptSecretHasher, SecretHasher

logger = logging.getLogger(__name__)

AVATAR_URL_TEMPLATE = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


def avatar_ref_for(username: str) -> str:
    """Return the seeded avatar image URL for a username."""
    return AVATAR_URL_TEMPLATE.format(seed=quote(username, safe=""))


@dataclass
class IdentityService:
    """Creates, looks up, authenticates and recovers user identities."""

    store: RecordStore
    hasher: SecretHasher = field(default_factory=BcryptSecretHasher)
    clock: Clock = field(default_factory=MonotonicUtcClock)

    async def create_user(
        self,
        username: str,
        secret: str,
        question: RecoveryQuestion | str,
        answer_secret: str,
    ) -> User:
        """Register a new account and return its public view.

        The username pre-check is not atomic. Against the remote backend the
        unique constraint on ``users.username`` still reports a conflict.
        """
        _require_non_blank(username, "username")
        _require_non_blank(secret, "secret")
        _require_non_blank(answer_secret, "recovery answer")
        recovery_question = _coerce_question(question)

        if await self.store.find_one(USERS, {"username": username}) is not None:
            logger.warning("Signup rejected: username %r already exists", username)
            raise ConflictError(f"Username {username!r} already exists")

        record = UserRecord(
            id=str(uuid4()),
            username=username,
            credential_secret=await asyncio.to_thread(self.hasher.hash, secret),
            recovery_question=recovery_question,
            recovery_answer_secret=await asyncio.to_thread(
                self.hasher.hash, answer_secret
            ),
            avatar_ref=avatar_ref_for(username),
            created_at=self.clock.now(),
        )
        await self.store.insert(USERS, _to_row(record))
        logger.info("Created user %r [id=%s]", username, record.id)
        return record.to_user()

    async def find_by_username(self, username: str) -> User | None:
        """Return the account with this exact username, if any."""
        record = await self._find_record(username)
        return record.to_user() if record else None

    async def authenticate(self, username: str, secret: str) -> User:
        """Return the account when the secret matches; raise AuthError otherwise."""
        record = await self._find_record(username)
        if record is None:
            logger.warning("Login failed: unknown username %r", username)
            raise AuthError()
        if not await asyncio.to_thread(
            self.hasher.verify, secret, record.credential_secret
        ):
            logger.warning("Login failed: wrong secret for %r", username)
            raise AuthError(recovery_question=record.recovery_question)
        logger.info("User %r authenticated", username)
        return record.to_user()

    async def recover_account(self, username: str, answer_secret: str) -> User:
        """Grant access when the recovery answer matches exactly."""
        record = await self._find_record(username)
        if record is None or not await asyncio.to_thread(
            self.hasher.verify, answer_secret, record.recovery_answer_secret
        ):
            logger.warning("Recovery failed for %r", username)
            raise RecoveryError(f"Recovery failed for {username!r}")
        logger.info("User %r recovered their account", username)
        return record.to_user()

    async def _find_record(self, username: str) -> UserRecord | None:
        row = await self.store.find_one(USERS, {"username": username})
        return _parse_user(row) if row else None


def _require_non_blank(value: str, label: str) -> None:
    if not value or not value.strip():
        raise ValidationError(f"{label} must not be blank")


def _coerce_question(question: RecoveryQuestion | str) -> RecoveryQuestion:
    if isinstance(question, RecoveryQuestion):
        return question
    try:
        return RecoveryQuestion(question)
    except ValueError:
        try:
            return RecoveryQuestion[question]
        except KeyError as exc:
            raise ValidationError(f"Unknown recovery question {question!r}") from exc


def _to_row(record: UserRecord) -> Record:
    return {
        "id": record.id,
        "username": record.username,
        "credential_secret": record.credential_secret,
        "recovery_question": record.recovery_question.value,
        "recovery_answer_secret": record.recovery_answer_secret,
        "avatar_ref": record.avatar_ref,
        "created_at": format_timestamp(record.created_at),
    }


def _parse_user(row: Record) -> UserRecord:
    """Parse a users row into a domain record."""
    return UserRecord(
        id=str(row["id"]),
        username=str(row["username"]),
        credential_secret=str(row["credential_secret"]),
        recovery_question=RecoveryQuestion(row["recovery_question"]),
        recovery_answer_secret=str(row["recovery_answer_secret"]),
        avatar_ref=str(row.get("avatar_ref") or avatar_ref_for(str(row["username"]))),
        created_at=parse_timestamp(row["created_at"]),
    )
