"""Storage policy for login and recovery secrets."""

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Protocol

import bcrypt


def _prehash(secret: str) -> bytes:
    # bcrypt ignores input past 72 bytes; a base64 SHA-256 digest is 44.
    return base64.b64encode(hashlib.sha256(secret.encode("utf-8")).digest())


class SecretHasher(Protocol):
    """Turns a secret into its stored form and checks candidates against it."""

    def hash(self, secret: str) -> str:
        """Return the value to persist for a secret."""

    def verify(self, candidate: str, stored: str) -> bool:
        """Return True when the candidate matches the stored value exactly."""


@dataclass(frozen=True)
class BcryptSecretHasher(SecretHasher):
    """Salted one-way hashing with bcrypt over a SHA-256 pre-hash."""

    rounds: int = 12

    def hash(self, secret: str) -> str:
        return bcrypt.hashpw(
            _prehash(secret), bcrypt.gensalt(rounds=self.rounds)
        ).decode("utf-8")

    def verify(self, candidate: str, stored: str) -> bool:
        try:
            return bcrypt.checkpw(_prehash(candidate), stored.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash, e.g. a plaintext legacy row.
            return False


@dataclass(frozen=True)
class PlaintextSecretHasher(SecretHasher):
    """Stores secrets verbatim, for stores that predate hashing."""

    def hash(self, secret: str) -> str:
        return secret

    def verify(self, candidate: str, stored: str) -> bool:
        return hmac.compare_digest(candidate.encode("utf-8"), stored.encode("utf-8"))
