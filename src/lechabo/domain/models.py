"""Domain models for identities and photos."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class RecoveryQuestion(Enum):
    """Security questions offered at signup."""

    FAVORITE_COLOR = "What is your favorite color?"
    FIRST_PET = "What was the name of your first pet?"
    BIRTH_CITY = "In which city were you born?"
    MOTHER_NAME = "What is your mother's name?"
    FAVORITE_FOOD = "What is your favorite food?"


@dataclass(frozen=True)
class User:
    """Public view of a registered account, safe to hand to the UI."""

    id: str
    username: str
    recovery_question: RecoveryQuestion
    avatar_ref: str
    created_at: datetime


@dataclass(frozen=True)
class UserRecord:
    """A stored account, including its secrets."""

    id: str
    username: str
    credential_secret: str
    recovery_question: RecoveryQuestion
    recovery_answer_secret: str
    avatar_ref: str
    created_at: datetime

    def to_user(self) -> User:
        """Drop the secrets and return the public view."""
        return User(
            id=self.id,
            username=self.username,
            recovery_question=self.recovery_question,
            avatar_ref=self.avatar_ref,
            created_at=self.created_at,
        )


@dataclass(frozen=True)
class Photo:
    """A shared photo and the set of usernames that liked it."""

    id: str
    uploader_username: str
    stored_file_ref: str
    title: str
    tags: str
    description: str
    likes: frozenset[str]
    created_at: datetime

    def is_liked_by(self, username: str) -> bool:
        return username in self.likes


@dataclass(frozen=True)
class ProfileSummary:
    """Totals shown on a user's profile."""

    username: str
    photo_count: int
    total_likes: int
