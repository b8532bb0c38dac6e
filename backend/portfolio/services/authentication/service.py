"""
AuthenticationService
=====================

Account lifecycle: registration, login, token refresh, password change,
logout and account deletion. Every public method returns a
:class:`~portfolio.services._shared.result.Result`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError

from portfolio.models.user import User
from portfolio.schemas.auth import (
    ChangePasswordSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
)
from portfolio.services._shared.base import BaseService
from portfolio.services._shared.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    ServiceError,
    violates,
)
from portfolio.services._shared.result import Result
from portfolio.services.authentication.dto import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    UserOut,
)
from portfolio.services.tokens.service import JwtTokenService


class AuthenticationService(BaseService):
    """
    Application service for accounts and sessions.

    :param tokens: Token service issuing and rotating tokens.
    :param default_role: Role granted to every new account.
    """

    def __init__(
        self,
        *,
        tokens: JwtTokenService,
        default_role: str = "User",
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(tokens=tokens, logger=logger)
        self.token_service = tokens
        self.default_role = default_role

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register(self, payload: Mapping[str, Any] | None) -> Result[UserOut]:
        """Create an account with the default role; email and username must be free."""
        return self.execute("register", lambda: self._register(RegisterSchema().load(self.payload(payload))))

    def _register(self, dto: RegisterIn) -> UserOut:
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(dto.email):
                    raise ConflictError("User", "email already in use")
                if uow.users.exists_by_username(dto.username):
                    raise ConflictError("User", "username already in use")

                user = User(email=dto.email, username=dto.username, full_name=dto.full_name)
                user.password = dto.password
                role, _ = uow.roles.get_or_create(self.default_role)
                user.roles.append(role)
                uow.users.add(user)
                out = UserOut.from_model(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email"):
                raise ConflictError("User", "email already in use") from exc
            if violates(exc, "uq_users_username"):
                raise ConflictError("User", "username already in use") from exc
            raise

        self.log.info("auth.registered user_id=%s", out.id)
        return out

    # --------------------------------------------------------------------- #
    # Sessions
    # --------------------------------------------------------------------- #

    def login(self, payload: Mapping[str, Any] | None) -> Result[LoginOut]:
        """Verify credentials and start a new session (replacing any previous one)."""
        return self.execute("login", lambda: self._login(LoginSchema().load(self.payload(payload))))

    def _login(self, dto: LoginIn) -> LoginOut:
        with self.ro_uow() as uow:
            user = uow.users.authenticate(dto.identifier, dto.password)
        if user is None:
            raise AuthError("Invalid credentials.")

        access = self.token_service.issue_access_token(user)
        refresh = self.token_service.generate_refresh_token()
        if not self.token_service.persist_refresh_token(user, refresh):
            raise ServiceError("Could not start a session.")

        self.log.info("auth.login user_id=%s", user.id)
        return LoginOut(
            access_token=access,
            refresh_token=refresh,
            refresh_token_expires_at=user.refresh_expires_at,
            user=UserOut.from_model(user),
        )

    def refresh(self, payload: Mapping[str, Any] | None) -> Result[TokenPairOut]:
        """Rotate the refresh token; see :meth:`JwtTokenService.refresh_tokens`."""
        return self.execute("refresh", lambda: self._refresh(RefreshSchema().load(self.payload(payload))))

    def _refresh(self, dto: RefreshIn) -> TokenPairOut:
        pair = self.token_service.refresh_tokens(dto.access_token, dto.refresh_token)
        return TokenPairOut(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            refresh_token_expires_at=pair.refresh_token_expires_at,
        )

    def logout(self, access_token: str | None) -> Result[None]:
        """End the caller's session by clearing the stored refresh token."""
        return self.execute("logout", lambda: self._logout(access_token))

    def _logout(self, access_token: str | None) -> None:
        user_id = self.current_user_id(access_token)
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        if not self.token_service.revoke_refresh_token(user):
            raise ServiceError("Could not end the session.")

    # --------------------------------------------------------------------- #
    # Account management
    # --------------------------------------------------------------------- #

    def change_password(
        self, payload: Mapping[str, Any] | None, access_token: str | None
    ) -> Result[None]:
        """
        Replace the caller's password after checking the current one.

        The stored refresh token is cleared as well, so other sessions must
        sign in again once their access tokens expire.
        """
        return self.execute(
            "change_password",
            lambda: self._change_password(
                ChangePasswordSchema().load(self.payload(payload)), access_token
            ),
        )

    def _change_password(self, dto: ChangePasswordIn, access_token: str | None) -> None:
        user_id = self.current_user_id(access_token)
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            if not user.verify_password(dto.current_password):
                raise AuthError("Current password is incorrect.")
            uow.users.update_password(user_id, dto.new_password)
            user.refresh_token = None
            user.refresh_token_expiry_time = None
        self.log.info("auth.password_changed user_id=%s", user_id)

    def delete_user(self, access_token: str | None) -> Result[None]:
        """Delete the caller's account and everything it owns."""
        return self.execute("delete_user", lambda: self._delete_user(access_token))

    def _delete_user(self, access_token: str | None) -> None:
        user_id = self.current_user_id(access_token)
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.delete(user)
        self.log.info("auth.user_deleted user_id=%s", user_id)
