"""OAuth token storage on top of KeyValueStore."""

from __future__ import annotations

import time

from cachecluster_core.constants import AUTH_KEY, DEFAULT_TOKEN_LIFETIME_SECONDS
from cachecluster_core.interfaces.medium import PersistenceMedium
from cachecluster_core.models.tokens import TokenSet
from cachecluster_infra.storages.key_value_store import KeyValueStore


class TokenStore(KeyValueStore):
    """Persists a single token set under AUTH_KEY."""

    def __init__(self, medium: PersistenceMedium) -> None:
        """Initialize with an empty current state."""
        super().__init__(medium)
        self._current_state = TokenSet(access_token="", refresh_token="", expires_in=0)

    @property
    def current_state(self) -> TokenSet:
        """Last token set saved or loaded."""
        return self._current_state

    async def init(self) -> None:
        """Load the stored token set into the current state."""
        await self.take()

    async def save(self, tokens: TokenSet) -> None:
        """Store tokens with expires_in converted to an absolute epoch time."""
        lifetime = (
            DEFAULT_TOKEN_LIFETIME_SECONDS if tokens.expires_in is None else tokens.expires_in
        )
        stored = tokens.model_copy(update={"expires_in": int(time.time()) + lifetime})
        await self.add_item(AUTH_KEY, stored.model_dump_json())
        self._current_state = tokens

    async def take(self) -> TokenSet:
        """Load the stored token set; an empty set when nothing is stored."""
        raw = await self.get_item(AUTH_KEY)
        if raw is None:
            return TokenSet()
        tokens = TokenSet.model_validate_json(raw)
        self._current_state = tokens
        return tokens

    async def get_and_set_token_data(self, tokens: TokenSet) -> TokenSet:
        """Save tokens and return them as stored."""
        await self.save(tokens)
        return await self.take()

    async def destroy(self) -> None:
        """Delete stored tokens and reset the current state."""
        await self.remove_item(AUTH_KEY)
        self._current_state = TokenSet(access_token="", refresh_token="", expires_in=0)
