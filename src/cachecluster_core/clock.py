"""Wall-clock implementation of the Clock interface."""

from __future__ import annotations

from datetime import UTC, datetime


class SystemClock:
    """Clock reading the system time in UTC."""

    def now(self) -> datetime:
        """Return the current UTC time."""
        return datetime.now(UTC)
