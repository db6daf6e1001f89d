"""Clock collaborators used for timestamps and default search bounds."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Interface for the current time."""

    def now(self) -> datetime:
        """Return the current date and time."""
        ...


class SystemClock:
    """Wall clock in UTC, returned as naive datetimes to match stored values."""

    def now(self) -> datetime:
        return datetime.now(UTC).replace(tzinfo=None)


class FixedClock:
    """Clock pinned to a settable instant."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant
