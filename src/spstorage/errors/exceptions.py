"""Exception hierarchy and HTTP error mapping for spstorage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class SPStorageError(Exception):
    """
    Base exception for spstorage.

    Attributes:
        details: Optional structured information (e.g., HTTP status, path).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class ConfigurationError(SPStorageError):
    """Raised when mount parameters are invalid. Always fatal."""


class NotFoundError(SPStorageError):
    """
    Raised when a path does not resolve to a remote file or folder.

    Besides HTTP 404 this covers SharePoint's file/folder-not-found error
    numbers, whatever status they arrive with.
    """


class RemoteOperationError(SPStorageError):
    """Raised for any other failure reported by the remote client."""


class AuthError(RemoteOperationError):
    """Raised when the remote rejects the credentials (HTTP 401)."""


class PermissionError(RemoteOperationError):
    """Raised when access is denied (HTTP 403), e.g. no rights on the library."""


class InvalidArgumentError(RemoteOperationError):
    """Raised when request arguments are invalid (HTTP 400)."""


class ConflictError(RemoteOperationError):
    """Raised on HTTP 409/412, e.g. an ETag mismatch or a checked-out file."""


class RateLimitError(RemoteOperationError):
    """Raised when SharePoint throttles the caller (HTTP 429)."""


class NetworkError(RemoteOperationError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(RemoteOperationError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """
    HTTP error information extracted from a SharePoint REST response.

    ``details["error_code"]`` carries the ``odata.error.code`` value, e.g.
    ``"-2130575338, Microsoft.SharePoint.SPException"``.
    """

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


# SharePoint reports a missing file or folder with these error numbers; some
# farms send them with a 500 instead of a 404.
_NOT_FOUND_ERROR_NUMBERS: frozenset[str] = frozenset(
    {
        "-2130575338",  # SPException: file not found
        "-2147024894",  # System.IO.FileNotFoundException
        "-2147024893",  # System.IO.DirectoryNotFoundException
    }
)


def _error_number(info: HttpErrorInfo) -> str | None:
    code = (info.details or {}).get("error_code")
    if not isinstance(code, str) or not code:
        return None
    return code.split(",", 1)[0].strip()


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> SPStorageError:
    """
    Map an HTTP error to a spstorage exception.

    Policy:
        - SharePoint not-found error number (any status) -> NotFoundError
        - 400 -> InvalidArgumentError
        - 401 -> AuthError
        - 403 -> PermissionError
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - otherwise (5xx included) -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if _error_number(info) in _NOT_FOUND_ERROR_NUMBERS:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)
