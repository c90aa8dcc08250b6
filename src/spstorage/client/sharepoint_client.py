"""SharePoint REST client facade (internal use only)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

import requests

from spstorage.errors import (
    ApiError,
    ConfigurationError,
    HttpErrorInfo,
    NetworkError,
    NotFoundError,
    RateLimitError,
    SPStorageError,
    map_http_error,
)
from spstorage.models import DirectoryListing, ItemDescriptor, ItemKind
from spstorage.util.paths import basename
from spstorage.util.time import parse_rfc3339

from .fields import (
    FILE_PROPERTIES,
    FOLDER_LISTING_PROPERTIES,
    FOLDER_PROPERTIES,
    PROPERTY_LIST_ITEM,
    PROPERTY_MTIME,
    PROPERTY_NAME,
    PROPERTY_SIZE,
    PROPERTY_URL,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: int = 1


class SharePointClient:
    """
    Document-library client over an Office365 ``ClientContext`` (internal only).

    Notes:
        - The ``ClientContext`` is NOT exposed.
        - Throttling, network and 5xx failures are retried here; callers see
          the mapped exception once retries are exhausted.
    """

    def __init__(self, site_url: str, credentials: dict[str, str]) -> None:
        try:
            from office365.runtime.auth.user_credential import UserCredential
            from office365.sharepoint.client_context import ClientContext
        except Exception as exc:  # pragma: no cover
            raise ConfigurationError(
                "Office365-REST-Python-Client is not available",
                details={"hint": "Install Office365-REST-Python-Client"},
                cause=exc,
            ) from exc

        self._retry_policy = _RetryPolicy()
        user_credential = UserCredential(credentials["user"], credentials["password"])
        self._ctx = ClientContext(site_url).with_credentials(user_credential)

    @classmethod
    def from_context(cls, ctx: Any) -> "SharePointClient":
        """Create client from a pre-built ClientContext (useful for tests)."""
        obj = cls.__new__(cls)
        obj._retry_policy = _RetryPolicy()
        obj._ctx = ctx
        return obj

    # ----------------------------
    # Public API
    # ----------------------------
    def create_folder(self, remote_path: str) -> ItemDescriptor:
        folder = self._ctx.web.folders.add(remote_path)
        self._execute()
        return _object_to_descriptor(folder, ItemKind.FOLDER, remote_path)

    def fetch_folder_contents(
        self,
        remote_path: str,
        properties: Optional[Sequence[str]] = None,
        folder: Optional[ItemDescriptor] = None,
    ) -> DirectoryListing:
        if folder is not None and folder.is_folder and folder.handle is not None:
            folder_obj = folder.handle
        else:
            folder_obj = self._ctx.web.get_folder_by_server_relative_url(remote_path)

        # One query per execute, so a failure never leaves the other one queued.
        files = folder_obj.files
        self._ctx.load(files, list(properties or FILE_PROPERTIES))
        self._execute()
        folders = folder_obj.folders.expand([PROPERTY_LIST_ITEM])
        self._ctx.load(folders, list(properties or FOLDER_LISTING_PROPERTIES))
        self._execute()

        items: list[ItemDescriptor] = []
        for kind, collection in ((ItemKind.FILE, files), (ItemKind.FOLDER, folders)):
            for obj in collection:
                name = _get_property(obj, PROPERTY_NAME) or ""
                items.append(_object_to_descriptor(obj, kind, f"{remote_path}/{name}"))

        logger.debug("Fetched %d children of %s", len(items), remote_path)
        return DirectoryListing(
            remote_path=remote_path,
            items=tuple(items),
            handle=(files, folders),
        )

    def fetch_file_or_folder(
        self,
        remote_path: str,
        properties: Optional[Sequence[str]] = None,
        as_file: Optional[bool] = None,
    ) -> ItemDescriptor:
        attempts = (True, False) if as_file is None else (as_file,)
        errors: list[SPStorageError] = []
        for is_file in attempts:
            try:
                return self._fetch_one(remote_path, properties, is_file)
            except NotFoundError as exc:
                errors.append(exc)

        raise NotFoundError(
            "File or folder not found",
            details={"remote_path": remote_path},
            cause=errors[-1] if errors else None,
        )

    def delete_object(self, remote_path: str, as_file: bool) -> None:
        obj = self._get_object(remote_path, as_file)
        obj.delete_object()
        self._execute()

    def is_hidden(self, item: ItemDescriptor) -> bool:
        """
        Folders without a list item (e.g. the library's ``Forms``) are hidden.

        Files are never hidden; checking them would cost an extra request.
        """
        if item.kind is ItemKind.FILE or item.handle is None:
            return False

        list_item = _get_property(item.handle, PROPERTY_LIST_ITEM)
        if list_item is None:
            # Not loaded for this object, so nothing to decide on.
            return False
        if isinstance(list_item, dict):
            return list_item.get("Id") is None
        return _get_property(list_item, "Id") is None

    # ----------------------------
    # Internals
    # ----------------------------
    def _get_object(self, remote_path: str, as_file: bool) -> Any:
        if as_file:
            return self._ctx.web.get_file_by_server_relative_url(remote_path)
        return self._ctx.web.get_folder_by_server_relative_url(remote_path)

    def _fetch_one(
        self,
        remote_path: str,
        properties: Optional[Sequence[str]],
        as_file: bool,
    ) -> ItemDescriptor:
        obj = self._get_object(remote_path, as_file)
        default = FILE_PROPERTIES if as_file else FOLDER_PROPERTIES
        self._ctx.load(obj, list(properties or default))
        self._execute()
        kind = ItemKind.FILE if as_file else ItemKind.FOLDER
        return _object_to_descriptor(obj, kind, remote_path)

    def _execute(self) -> None:
        """
        Send the queued query, retrying transient failures.

        ``execute_query_retry`` puts the failed query back on the queue before
        each retry; a plain second ``execute_query`` would find the queue empty.
        """
        try:
            self._ctx.execute_query_retry(
                max_retry=self._retry_policy.max_retries + 1,
                timeout_secs=self._retry_policy.initial_delay_sec,
                jitter=False,
                exceptions=(requests.exceptions.RequestException, OSError),
                is_retriable=lambda exc: self._should_retry(self._map_exception(exc)),
                failure_callback=_log_retry,
            )
        except SPStorageError:
            raise
        except Exception as exc:
            raise self._map_exception(exc) from exc

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        if isinstance(exc, SPStorageError):
            return exc

        if isinstance(exc, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
            return NetworkError("Network error", cause=exc)

        if isinstance(exc, requests.exceptions.RequestException):
            response = getattr(exc, "response", None)
            if response is not None:
                return map_http_error(_response_to_info(response, exc), cause=exc)
            return ApiError("SharePoint request failed", cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("SharePoint API error", cause=exc)


def _get_property(obj: Any, name: str) -> Any:
    props = getattr(obj, "properties", None)
    if isinstance(props, dict):
        return props.get(name)
    return None


def _object_to_descriptor(obj: Any, kind: ItemKind, fallback_path: str) -> ItemDescriptor:
    url = _get_property(obj, PROPERTY_URL)
    remote_path = url if isinstance(url, str) and url else fallback_path

    name = _get_property(obj, PROPERTY_NAME)
    if not isinstance(name, str) or not name:
        name = basename(remote_path)

    size = None
    raw_size = _get_property(obj, PROPERTY_SIZE)
    if isinstance(raw_size, str) and raw_size.isdigit():
        size = int(raw_size)
    elif isinstance(raw_size, int) and not isinstance(raw_size, bool):
        size = raw_size

    last_modified = None
    raw_mtime = _get_property(obj, PROPERTY_MTIME)
    if isinstance(raw_mtime, datetime):
        # The SDK parses offset-less values into naive datetimes; they are UTC.
        if raw_mtime.tzinfo is None:
            raw_mtime = raw_mtime.replace(tzinfo=timezone.utc)
        last_modified = raw_mtime
    elif isinstance(raw_mtime, str):
        try:
            last_modified = parse_rfc3339(raw_mtime)
        except ValueError:
            last_modified = None

    return ItemDescriptor(
        kind=kind,
        remote_path=remote_path,
        name=name,
        size=size,
        last_modified=last_modified,
        handle=obj,
    )


def _response_to_info(response: Any, exc: BaseException) -> HttpErrorInfo:
    status_code = getattr(response, "status_code", None)
    reason = getattr(response, "reason", None)

    message = None
    details: dict[str, Any] = {}
    try:
        payload = response.json()
    except Exception:
        payload = None

    if isinstance(payload, dict):
        err = payload.get("error") or payload.get("odata.error") or {}
        if isinstance(err, dict):
            code = err.get("code")
            if isinstance(code, str):
                details["error_code"] = code
            msg = err.get("message")
            if isinstance(msg, dict):
                msg = msg.get("value")
            if isinstance(msg, str) and msg:
                message = msg

    if not isinstance(status_code, int):
        status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message or str(exc) or None,
        details=details or None,
    )


def _log_retry(attempt: int, exc: Exception) -> None:
    logger.debug("Retrying after %s (attempt %d)", type(exc).__name__, attempt)
