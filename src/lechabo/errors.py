"""Failure kinds raised by the persistence layer.

Every error here is an ordinary exception the caller is expected to catch and
translate into its own message. Messages are diagnostics for developers and
logs, never text meant for the end user.
"""

from lechabo.domain.models import RecoveryQuestion


class LechaboError(Exception):
    """Base class for all persistence-layer failures."""


class ValidationError(LechaboError):
    """Raised when input is malformed, e.g. a blank photo title."""


class ConflictError(LechaboError):
    """Raised when a signup uses a username that already exists."""


class AuthError(LechaboError):
    """Raised when a username/secret pair does not authenticate.

    ``recovery_question`` is set only when the username exists, so the caller
    can offer account recovery. The message is the same either way.
    """

    def __init__(self, recovery_question: RecoveryQuestion | None = None) -> None:
        super().__init__("Invalid username or secret")
        self.recovery_question = recovery_question

    @property
    def recovery_available(self) -> bool:
        """Return True when the caller may offer the recovery question."""
        return self.recovery_question is not None


class RecoveryError(LechaboError):
    """Raised when a recovery answer does not match."""


class NotFound(LechaboError):
    """Raised when an operation references a nonexistent id."""


class BackendUnavailable(LechaboError):
    """Raised when the storage backend cannot be reached or written."""


class ConfigurationError(LechaboError):
    """Raised at startup when the configured backend cannot be used."""
