"""Integration fixtures: real media, nothing mocked."""

from __future__ import annotations

import logging
import os
import socket
import time
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from urllib.parse import urlparse

import pytest
import pytest_asyncio

from cachecluster_core.config.settings import Settings

# Database 1 is flushed before and after every test
REDIS_TEST_URL = os.environ.get("CC_TEST_REDIS_URL", "redis://localhost:6379/1")


def _reachable(url: str, attempts: int = 5, pause: float = 1.0) -> bool:
    """Try a TCP connect to the URL's host and port a few times."""
    parsed = urlparse(url)
    address = (parsed.hostname or "localhost", parsed.port or 6379)
    for attempt in range(attempts):
        try:
            with socket.create_connection(address, timeout=1.0):
                return True
        except OSError:
            if attempt < attempts - 1:
                time.sleep(pause)
    return False


_redis_up = _reachable(REDIS_TEST_URL)

require_redis = pytest.mark.skipif(
    not _redis_up,
    reason=f"Redis not reachable at {REDIS_TEST_URL}",
)


@pytest_asyncio.fixture
async def redis_client() -> AsyncGenerator[object, None]:
    """Client on the test database, flushed around each test."""
    if not _redis_up:
        pytest.skip("Redis not available")

    from redis.asyncio import Redis

    client = Redis.from_url(REDIS_TEST_URL)
    await client.flushdb()
    yield client
    await client.flushdb()
    await client.aclose()  # type: ignore[attr-defined]


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Put back the root handlers that configure_logging() swaps out."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers = saved_handlers
    root.level = saved_level


@pytest.fixture
def real_settings(tmp_path: Path) -> Settings:
    """Settings with the disk medium under a temporary directory."""
    from tests.mocks.mock_settings import make_real_settings

    return make_real_settings(tmp_path)
