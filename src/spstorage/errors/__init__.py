"""Public error exports for spstorage."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    ConfigurationError,
    ConflictError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    RemoteOperationError,
    SPStorageError,
    map_http_error,
)

__all__ = [
    "SPStorageError",
    "ConfigurationError",
    "NotFoundError",
    "RemoteOperationError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "ConflictError",
    "RateLimitError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
]
