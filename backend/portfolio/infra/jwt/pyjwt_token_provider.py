# portfolio/infra/jwt/pyjwt_token_provider.py
from __future__ import annotations

from typing import Any

import jwt

from portfolio.services._shared.errors import ConfigurationError, ValidationError
from portfolio.services._shared.ports import TokenProvider
from portfolio.services.tokens.dto import JwtSettings

REQUIRED_CLAIMS = ("exp", "iat", "iss", "aud")


class PyJWTTokenProvider(TokenProvider):
    """
    HMAC JWT adapter on top of PyJWT.

    Decoding pins the algorithm list to the configured one, requires the
    registered claims in ``REQUIRED_CLAIMS`` and applies zero clock leeway.
    Every PyJWT failure is surfaced as :class:`ValidationError`.
    """

    def __init__(self, settings: JwtSettings) -> None:
        self.settings = settings

    def _key(self) -> str:
        if not self.settings.is_configured:
            raise ConfigurationError("JWT signing key is not configured (JWT_SECRET_KEY).")
        return self.settings.signing_key

    def encode(self, claims: dict[str, Any]) -> str:
        return jwt.encode(claims, self._key(), algorithm=self.settings.algorithm)

    def decode(self, token: str, *, verify_exp: bool = True) -> dict[str, Any]:
        key = self._key()
        try:
            return jwt.decode(
                token,
                key,
                algorithms=[self.settings.algorithm],
                audience=self.settings.audience,
                issuer=self.settings.issuer,
                leeway=0,
                options={"require": list(REQUIRED_CLAIMS), "verify_exp": verify_exp},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ValidationError("Token has expired.") from exc
        except jwt.PyJWTError as exc:
            raise ValidationError(f"Invalid token: {exc}") from exc
