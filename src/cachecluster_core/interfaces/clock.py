"""Abstract clock interface."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current time for staleness and header defaults."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...
