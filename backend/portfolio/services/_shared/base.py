# portfolio/services/_shared/base.py
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar
from uuid import UUID

from marshmallow import ValidationError as SchemaValidationError

from portfolio.core import errors as api_errors
from portfolio.repositories.base import Pagination
from portfolio.services._shared.errors import (
    AuthError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from portfolio.services._shared.policies.common import is_owner
from portfolio.services._shared.result import Failure, Result
from portfolio.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

if TYPE_CHECKING:
    from portfolio.services.tokens.service import JwtTokenService

T = TypeVar("T")


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide read-only and read-write units of work.
    * Resolve the caller from an access token.
    * Translate service errors into API errors and :class:`Result` failures.
    * Offer shared helpers (pagination, ownership).

    Notes
    -----
    Services never touch the global session directly; every database access
    goes through a unit of work.
    """

    MAX_PAGE_SIZE = 100

    def __init__(
        self,
        *,
        tokens: JwtTokenService | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        :param tokens: Token service used to authenticate callers. Services
            that only expose public reads may omit it.
        :param logger: Component logger; defaults to the subclass module logger.
        """
        self.tokens = tokens
        self.log = logger or logging.getLogger(type(self).__module__)

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, isolation: str | None = None) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork(isolation_level=isolation)

    # -------------------------- Authentication -------------------------------

    def current_user_id(self, access_token: str | None) -> UUID:
        """
        Resolve the caller's user id from ``access_token``.

        :raises ConfigurationError: If the service was built without a token service.
        :raises AuthError: See :meth:`JwtTokenService.extract_user_id`.
        :raises ValidationError: See :meth:`JwtTokenService.extract_user_id`.
        """
        if self.tokens is None:
            raise ConfigurationError(f"{type(self).__name__} has no token service.")
        return self.tokens.extract_user_id(access_token)

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(
        self, *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """Clamp ``page`` to ``>= 1`` and ``limit`` to ``1..MAX_PAGE_SIZE``."""
        page = max(1, int(page))
        limit = min(max(1, int(limit)), self.MAX_PAGE_SIZE)
        return Pagination(page=page, limit=limit, sort=list(sort or []))

    def ensure_owner(self, actor_id: UUID | None, owner_id: UUID, *, msg: str | None = None) -> None:
        """
        :raises AuthorizationError: If ``actor_id`` does not own the resource.
        """
        if not is_owner(actor_id=actor_id, owner_id=owner_id):
            raise AuthorizationError(msg or "You can only modify your own resources.")

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map service-level errors to API-level (HTTP) errors.

        Anything that is not a service or schema error is returned untouched.
        """
        if isinstance(exc, SchemaValidationError):
            return api_errors.UnprocessableEntity(details={"errors": exc.normalized_messages()})
        if isinstance(exc, ConfigurationError):
            return api_errors.InternalError("Server is not configured to issue tokens.")
        if isinstance(exc, AuthError):
            return api_errors.Unauthorized(str(exc))
        if isinstance(exc, ValidationError):
            return api_errors.BadRequest(str(exc))
        if isinstance(exc, AuthorizationError):
            return api_errors.Forbidden(str(exc))
        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))
        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))
        if isinstance(exc, ServiceError):
            return api_errors.InternalError(str(exc) or "Operation failed.")
        return exc

    def to_failure(self, exc: ServiceError | SchemaValidationError) -> Failure:
        translated = self.translate_exceptions(exc)
        if not isinstance(translated, api_errors.APIError):
            raise TypeError(f"No API mapping for {type(exc).__name__}") from exc
        return Failure.from_api_error(translated)

    def execute(self, operation: str, fn: Callable[[], T]) -> Result[T]:
        """
        Run ``fn`` and wrap its outcome.

        Service and schema errors become ``Result.fail``; any other exception
        propagates unchanged.
        """
        try:
            value = fn()
        except (ServiceError, SchemaValidationError) as exc:
            failure = self.to_failure(exc)
            level = logging.ERROR if failure.status_code >= 500 else logging.INFO
            self.log.log(level, "%s failed: %s (%s)", operation, failure.message, failure.code)
            return Result.fail(failure)
        return Result.success(value)

    @staticmethod
    def payload(data: Any) -> dict[str, Any]:
        """Treat ``None`` as an empty payload so schemas report missing fields."""
        return dict(data or {})
