# portfolio/services/tokens/service.py
"""
JwtTokenService
===============

Issues and validates access tokens and rotates the single refresh token
stored on each user.

Per-user refresh state::

    NoSession --login--> Active(token, expiry) --refresh--> Active(new, expiry')
    Active --logout--> NoSession

A mismatched or expired refresh token is rejected without touching the
stored state; an expired token is only noticed when it is next presented.
"""

from __future__ import annotations

import base64
import logging
import re
import secrets
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from portfolio.services._shared.errors import (
    AuthError,
    ConfigurationError,
    ServiceError,
)
from portfolio.services._shared.ports import RotationResult, TokenProvider, UserStore
from portfolio.services.tokens.dto import JwtSettings, TokenPair

if TYPE_CHECKING:
    from portfolio.models.user import User

# Scheme word alone, or followed by any whitespace
BEARER = re.compile(r"bearer(?:\s+|$)", re.IGNORECASE)
REFRESH_TOKEN_BYTES = 64


class JwtTokenService:
    """
    Token lifecycle for authenticated users.

    :param settings: Signing key, issuer, audience and lifetimes.
    :param users: Port used to load users and write refresh state back.
    :param provider: Port that signs and verifies JWTs.
    :param logger: Component logger; defaults to this module's logger.
    """

    def __init__(
        self,
        settings: JwtSettings,
        users: UserStore,
        provider: TokenProvider,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.users = users
        self.provider = provider
        self.log = logger or logging.getLogger(__name__)

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)

    # ------------------------------------------------------------------ #
    # Access tokens
    # ------------------------------------------------------------------ #

    def issue_access_token(self, user: User) -> str:
        """
        Sign a new access token for ``user``.

        Claims: ``sub`` (user id), ``name`` (username), ``email``, a fresh
        ``jti``, ``roles`` from the user store, ``iss``, ``aud``, ``iat`` and
        ``exp``.

        :raises ConfigurationError: If the signing key is missing or empty.
        """
        if not self.settings.is_configured:
            self.log.error("token.issue_failed reason=missing_signing_key")
            raise ConfigurationError("JWT signing key is not configured (JWT_SECRET_KEY).")

        now = self.now_utc()
        claims: dict[str, Any] = {
            "sub": str(user.id),
            "name": user.username,
            "email": user.email,
            "jti": str(uuid4()),
            "roles": list(self.users.get_roles(user)),
            "iss": self.settings.issuer,
            "aud": self.settings.audience,
            "iat": now,
            "exp": now + self.settings.access_token_lifetime,
        }
        token = self.provider.encode(claims)
        self.log.info("token.issued user_id=%s", user.id)
        return token

    def extract_user_id(self, token: str | None) -> UUID:
        """
        Validate ``token`` (an optional ``Bearer`` prefix is accepted in any
        case) and return its subject as a UUID.

        :raises AuthError: Missing token, missing subject or non-UUID subject.
        :raises ValidationError: Signature, issuer, audience, expiry or
            structure checks failed.
        """
        try:
            claims = self.provider.decode(self._strip_bearer(token))
            return self._subject(claims)
        except ServiceError as exc:
            self.log.warning("token.rejected reason=%s", exc)
            raise

    def is_valid(self, token: str | None) -> bool:
        """Same checks as :meth:`extract_user_id`, answered as a boolean."""
        try:
            self.extract_user_id(token)
        except ServiceError:
            return False
        return True

    # ------------------------------------------------------------------ #
    # Refresh tokens
    # ------------------------------------------------------------------ #

    def generate_refresh_token(self) -> str:
        """Return 64 CSPRNG bytes, base64 encoded."""
        return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")

    def persist_refresh_token(self, user: User, refresh_token: str) -> bool:
        """
        Store ``refresh_token`` on ``user`` with a fresh expiry, replacing any
        previous one, and write the user back.

        :returns: ``False`` when the user store reports a failed write.
        """
        user.refresh_token = refresh_token
        user.refresh_token_expiry_time = self.now_utc() + self.settings.refresh_token_lifetime
        return self._save(user, "persist")

    def revoke_refresh_token(self, user: User) -> bool:
        """Clear the stored refresh token (logout)."""
        user.refresh_token = None
        user.refresh_token_expiry_time = None
        return self._save(user, "revoke")

    def refresh_tokens(self, access_token: str | None, refresh_token: str | None) -> TokenPair:
        """
        Exchange a (possibly expired) access token plus the current refresh
        token for a new pair.

        The access token must still pass signature, issuer and audience
        checks; only its expiry is ignored. The stored token is swapped
        atomically, so of two refreshes presenting the same token at most one
        gets a new pair.

        :raises AuthError: Unknown user, refresh token mismatch or expiry, or
            the token was rotated by a concurrent request.
        :raises ValidationError: The access token failed verification.
        :raises ServiceError: The new refresh token could not be persisted.
        """
        try:
            claims = self.provider.decode(self._strip_bearer(access_token), verify_exp=False)
            user_id = self._subject(claims)
        except ServiceError as exc:
            self.log.warning("token.refresh_rejected reason=%s", exc)
            raise

        user = self.users.get_by_id(user_id)
        if user is None:
            self.log.warning("token.refresh_rejected reason=unknown_user user_id=%s", user_id)
            raise AuthError("Invalid refresh request.")

        if not self._matches(user.refresh_token, refresh_token):
            self.log.warning("token.refresh_rejected reason=mismatch user_id=%s", user_id)
            raise AuthError("Invalid refresh token.")

        if not user.has_active_refresh_token(self.now_utc()):
            self.log.warning("token.refresh_rejected reason=expired user_id=%s", user_id)
            raise AuthError("Refresh token has expired.")

        access = self.issue_access_token(user)
        new_refresh = self.generate_refresh_token()
        now = self.now_utc()
        expires_at = now + self.settings.refresh_token_lifetime
        result = self.users.rotate_refresh_token(
            user_id,
            expected=refresh_token,
            new_token=new_refresh,
            expires_at=expires_at,
            now=now,
        )
        if result is RotationResult.STALE:
            # Another request rotated or revoked it after the checks above
            self.log.warning("token.refresh_rejected reason=stale user_id=%s", user_id)
            raise AuthError("Invalid refresh token.")
        if result is not RotationResult.OK:
            self.log.error("token.refresh_rotate_failed user_id=%s", user_id)
            raise ServiceError("Could not persist the rotated refresh token.")

        self.log.info("token.refreshed user_id=%s", user_id)
        return TokenPair(
            access_token=access,
            refresh_token=new_refresh,
            refresh_token_expires_at=expires_at,
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _strip_bearer(token: str | None) -> str:
        raw = (token or "").strip()
        if match := BEARER.match(raw):
            raw = raw[match.end() :].strip()
        if not raw:
            raise AuthError("Access token is missing.")
        return raw

    @staticmethod
    def _subject(claims: dict[str, Any]) -> UUID:
        sub = claims.get("sub")
        if not sub:
            raise AuthError("Token has no subject.")
        try:
            return UUID(str(sub))
        except ValueError as exc:
            raise AuthError("Token subject is not a valid user id.") from exc

    @staticmethod
    def _matches(stored: str | None, supplied: str | None) -> bool:
        if not stored or not supplied:
            return False
        return secrets.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))

    def _save(self, user: User, action: str) -> bool:
        user_id = user.id
        ok = self.users.update(user)
        if ok:
            self.log.info("token.refresh_%s user_id=%s", action, user_id)
        else:
            self.log.error("token.refresh_%s_failed user_id=%s", action, user_id)
        return ok
