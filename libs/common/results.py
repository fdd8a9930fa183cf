"""Uniform success/failure outcome for service operations.

Expected conditions (unknown record, duplicate code, ...) come back as typed
failures instead of exceptions. Anything unexpected is caught at the
operation boundary by ``service_operation``, logged, and turned into an
infrastructure failure so callers always get a structured outcome.
"""

import enum
import functools
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from fastapi import HTTPException, status
from libs.common.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    INFRASTRUCTURE = "infrastructure"


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[ServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T = None) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def not_found(cls, message: str) -> "ServiceResult[T]":
        return cls(error=ServiceError(ErrorKind.NOT_FOUND, message))

    @classmethod
    def invalid(cls, message: str) -> "ServiceResult[T]":
        return cls(error=ServiceError(ErrorKind.VALIDATION, message))

    @classmethod
    def failure(cls, message: str) -> "ServiceResult[T]":
        return cls(error=ServiceError(ErrorKind.INFRASTRUCTURE, message))


_HTTP_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INFRASTRUCTURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_failure(result: ServiceResult[T]) -> T:
    """Return the value of a successful result or raise the matching HTTPException."""
    if result.ok:
        return result.value
    raise HTTPException(
        status_code=_HTTP_STATUS_BY_KIND[result.error.kind],
        detail=result.error.message,
    )


def service_operation(
    description: str,
) -> Callable[
    [Callable[..., Awaitable[ServiceResult[Any]]]],
    Callable[..., Awaitable[ServiceResult[Any]]],
]:
    """Convert unexpected exceptions of an async operation into a failure result.

    ``description`` completes the sentence "Error <description>" in both the
    log line and the failure message. A ``tenant_id`` keyword argument, when
    present, is added to the log record.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as exc:
                tenant_id = kwargs.get("tenant_id")
                logger.exception(
                    "Error %s for tenant %s",
                    description,
                    tenant_id,
                    extra={"tenant_id": str(tenant_id) if tenant_id else None},
                )
                return ServiceResult.failure(f"Error {description}: {exc}")

        return wrapper

    return decorator
