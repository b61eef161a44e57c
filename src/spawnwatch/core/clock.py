"""Clock wrappers so callers control the notion of "now"."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current instant."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Reads the wall clock in UTC."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC instant."""
        return datetime.now(timezone.utc)


class FixedClock:
    """Manually advanced clock for deterministic evaluation."""

    def __init__(self, start: datetime) -> None:
        if start.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime.")
        self._now = start

    def now(self) -> datetime:
        """Return the frozen instant."""
        return self._now

    def advance(self, *, minutes: float = 0, seconds: float = 0) -> datetime:
        """Move the clock forward and return the new instant."""
        self._now = self._now + timedelta(minutes=minutes, seconds=seconds)
        return self._now

    def set(self, value: datetime) -> None:
        """Jump to an absolute instant."""
        if value.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime.")
        self._now = value
