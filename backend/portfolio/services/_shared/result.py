"""Success/failure envelope returned by application services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from portfolio.core.errors import APIError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Failure:
    """
    Describes why an operation failed, already mapped to HTTP semantics.

    :param code: Stable machine-readable code (``"unauthorized"``, ...).
    :param message: Client-safe summary.
    :param status_code: HTTP status the API layer should answer with.
    :param details: Optional structured context (validation messages).
    """

    code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api_error(cls, err: APIError) -> Failure:
        return cls(
            code=err.code,
            message=err.message,
            status_code=err.status_code,
            details=dict(err.details),
        )

    def to_api_error(self) -> APIError:
        return APIError(
            self.message,
            status_code=self.status_code,
            code=self.code,
            details=self.details or None,
        )


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Either a ``value`` (success) or an ``error`` (failure), never both."""

    value: T | None = None
    error: Failure | None = None

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def fail(cls, error: Failure) -> Result[T]:
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    def unwrap(self) -> T | None:
        """Return the value or raise the failure as an :class:`APIError`."""
        if self.error is not None:
            raise self.error.to_api_error()
        return self.value
