"""Shared constants for cache-cluster."""

from __future__ import annotations

from datetime import UTC, datetime

# Capacity applied to in-memory storages when no limit is given
DEFAULT_LIMIT = 1000

# Far-future stamp used for storages whose TTL is unset ("never expires")
NEVER_EXPIRES = datetime.max.replace(tzinfo=UTC)

# Deferred write delays (seconds)
HEADER_UPDATE_DELAY_SECONDS = 1.0
PERSIST_DELAY_SECONDS = 0.1

# Conditional request headers
IF_MODIFIED_SINCE = "If-Modified-Since"
IF_NONE_MATCH = "If-None-Match"
PLACEHOLDER_HEADER_VALUE = "---"

# Token storage
AUTH_KEY = "AUTHORIZE_DATA"
DEFAULT_TOKEN_LIFETIME_SECONDS = 86400
