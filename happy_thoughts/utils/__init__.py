"""Utility functions and helpers."""

from .exceptions import (
    ApiError,
    Forbidden,
    InternalStoreError,
    MalformedIdentifier,
    NotFound,
    TooManyRequests,
    Unauthenticated,
    ValidationFailed,
    raise_forbidden,
    raise_malformed_id,
    raise_not_found,
    raise_store_error,
    raise_too_many_requests,
)

__all__ = [
    "ApiError",
    "Forbidden",
    "InternalStoreError",
    "MalformedIdentifier",
    "NotFound",
    "TooManyRequests",
    "Unauthenticated",
    "ValidationFailed",
    "raise_forbidden",
    "raise_malformed_id",
    "raise_not_found",
    "raise_store_error",
    "raise_too_many_requests",
]
