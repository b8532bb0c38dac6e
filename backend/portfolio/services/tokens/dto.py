# portfolio/services/tokens/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any


@dataclass(frozen=True, slots=True)
class JwtSettings:
    """
    Token configuration, built once at the composition root.

    :param signing_key: Symmetric HMAC key. Empty means "not configured".
    :param issuer: Value written to and required in the ``iss`` claim.
    :param audience: Value written to and required in the ``aud`` claim.
    :param access_token_minutes: Access token lifetime.
    :param refresh_token_days: Refresh token lifetime.
    :param algorithm: JWS algorithm; only HMAC algorithms make sense here.
    """

    signing_key: str
    issuer: str
    audience: str
    access_token_minutes: int = 15
    refresh_token_days: int = 7
    algorithm: str = "HS256"

    @property
    def access_token_lifetime(self) -> timedelta:
        return timedelta(minutes=self.access_token_minutes)

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return timedelta(days=self.refresh_token_days)

    @property
    def is_configured(self) -> bool:
        return bool(self.signing_key and self.signing_key.strip())

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> JwtSettings:
        """Read the ``JWT_*`` keys of a Flask config (or any mapping)."""
        return cls(
            signing_key=str(config.get("JWT_SECRET_KEY") or ""),
            issuer=str(config.get("JWT_ISSUER", "")),
            audience=str(config.get("JWT_AUDIENCE", "")),
            access_token_minutes=int(config.get("JWT_ACCESS_TOKEN_MINUTES", 15)),
            refresh_token_days=int(config.get("JWT_REFRESH_TOKEN_DAYS", 7)),
            algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
        )


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Access token plus the refresh token that can renew it.

    :param access_token: Signed JWT.
    :param refresh_token: Opaque base64 refresh token.
    :param refresh_token_expires_at: When ``refresh_token`` stops being accepted.
    """

    access_token: str
    refresh_token: str
    refresh_token_expires_at: datetime | None = None
