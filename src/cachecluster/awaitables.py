"""Helpers for storages whose operations may be sync or async."""

from __future__ import annotations

import inspect
from typing import Any


async def resolve(value: Any) -> Any:  # noqa: ANN401
    """Await value if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value
