"""
Clock abstractions for deterministic timestamps.

Notes
-----
Storage-assigned timestamps use the same text layout SQLite produces for
``datetime('now')`` so that rows from either backend sort identically.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Clock(Protocol):
    """A source of time for deterministic behavior."""

    def now(self) -> datetime:
        """
        Return the current time.

        Returns
        -------
        datetime
            A timezone-aware datetime.
        """
        ...


@dataclass(frozen=True, slots=True)
class SystemClock:
    """Clock that returns the current system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class FixedClock:
    """Clock that always returns a fixed time (useful for tests)."""

    fixed_time: datetime

    def now(self) -> datetime:
        if self.fixed_time.tzinfo is None:
            return self.fixed_time.replace(tzinfo=timezone.utc)
        return self.fixed_time


def format_timestamp(clock: Clock) -> str:
    """
    Render the clock's current time as a storage timestamp.

    Parameters
    ----------
    clock:
        Time source.

    Returns
    -------
    str
        UTC time formatted as ``YYYY-MM-DD HH:MM:SS``.
    """
    return clock.now().astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)
