"""Timestamp source for record creation."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

_TICK = timedelta(microseconds=1)


def _system_utc_now() -> datetime:
    return datetime.now(tz=UTC)


class Clock(Protocol):
    """Interface for stamping creation times."""

    def now(self) -> datetime:
        """Return the current UTC time."""


@dataclass
class MonotonicUtcClock(Clock):
    """UTC clock that never repeats or goes back within a process."""

    source: Callable[[], datetime] = _system_utc_now
    _last: datetime | None = field(default=None, init=False)

    def now(self) -> datetime:
        current = self.source()
        if self._last is not None and current <= self._last:
            current = self._last + _TICK
        self._last = current
        return current


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp with fixed precision so strings sort by time."""
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def parse_timestamp(raw: object) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime."""
    if isinstance(raw, datetime):
        parsed = raw
    else:
        parsed = datetime.fromisoformat(str(raw))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
