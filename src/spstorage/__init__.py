"""spstorage public API."""

from __future__ import annotations

from spstorage.cache import CacheEntry, CappedMemoryCache
from spstorage.client import (
    RemoteClient,
    RemoteClientFactory,
    SharePointClient,
    SharePointClientFactory,
)
from spstorage.config import StorageConfig
from spstorage.errors import (
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
from spstorage.models import (
    SPACE_UNKNOWN,
    DirectoryListing,
    ItemDescriptor,
    ItemKind,
    StatResult,
)
from spstorage.storage import SharePointStorage
from spstorage.util.paths import to_remote_path

__all__ = [
    # High-level
    "SharePointStorage",
    "StorageConfig",
    "to_remote_path",
    # Remote client
    "RemoteClient",
    "RemoteClientFactory",
    "SharePointClient",
    "SharePointClientFactory",
    # Cache / Models
    "CappedMemoryCache",
    "CacheEntry",
    "ItemKind",
    "ItemDescriptor",
    "DirectoryListing",
    "StatResult",
    "SPACE_UNKNOWN",
    # Errors
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
