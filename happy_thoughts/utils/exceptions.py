"""API error taxonomy and raise helpers for FastAPI routers.

Every error leaving a route is one of the ``ApiError`` subclasses below; the
application's exception handler renders it as
``{"error": ..., "details": ..., "request_id": ...}``.
"""

from typing import Any, NoReturn

from fastapi import status


class ApiError(Exception):
    """Base class for errors rendered as JSON error responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"

    def __init__(self, error: str | None = None, details: Any = None, headers: dict[str, str] | None = None) -> None:
        if error is not None:
            self.error = error
        self.details = details
        self.headers = headers
        super().__init__(self.error)


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"


class MalformedIdentifier(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid id"


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthenticated"

    def __init__(self, error: str | None = None, details: Any = None) -> None:
        super().__init__(error, details, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class TooManyRequests(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "Too many requests"


class InternalStoreError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"


def raise_not_found(resource_name: str, *, cause: Exception | None = None) -> NoReturn:
    raise NotFound(f"{resource_name} not found") from cause


def raise_malformed_id(detail: str, *, cause: Exception | None = None) -> NoReturn:
    raise MalformedIdentifier(details=detail) from cause


def raise_forbidden(detail: str, *, cause: Exception | None = None) -> NoReturn:
    raise Forbidden(details=detail) from cause


def raise_too_many_requests(detail: str, *, retry_after: int | None = None, cause: Exception | None = None) -> NoReturn:
    headers = {"Retry-After": str(retry_after)} if retry_after else None
    raise TooManyRequests(detail, headers=headers) from cause


def raise_store_error(detail: str, *, cause: Exception | None = None) -> NoReturn:
    raise InternalStoreError(detail) from cause
