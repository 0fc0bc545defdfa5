"""OAuth token set model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TokenSet(BaseModel):
    """Access/refresh token pair with its expiry."""

    access_token: str | None = Field(default=None, description="Bearer access token")
    refresh_token: str | None = Field(default=None, description="Refresh token")
    expires_in: int | None = Field(
        default=None,
        description="Lifetime in seconds when saving; absolute epoch seconds once stored",
    )
