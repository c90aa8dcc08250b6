"""SharePointStorage: filesystem-style access to a SharePoint document library."""

from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping, Optional

from spstorage.cache import DEFAULT_CAPACITY, CacheEntry, CappedMemoryCache
from spstorage.client import RemoteClient, RemoteClientFactory, SharePointClientFactory
from spstorage.config import StorageConfig
from spstorage.errors import NotFoundError, SPStorageError
from spstorage.models import SPACE_UNKNOWN, DirectoryListing, ItemDescriptor, ItemKind, StatResult
from spstorage.util.paths import parent_remote_path, to_remote_path
from spstorage.util.time import now_timestamp, to_timestamp

logger = logging.getLogger(__name__)


class SharePointStorage:
    """
    POSIX-like storage over one SharePoint document library.

    Policy:
        - Remote failures never escape an operation; they become ``False`` or
          ``None`` as the filesystem convention of each call dictates.
        - ``ConfigurationError`` is raised at construction and never recovered.
        - Metadata is cached per instance; mkdir/unlink invalidate the
          affected entries instead of updating them.
    """

    def __init__(
        self,
        config: StorageConfig,
        *,
        client_factory: Optional[RemoteClientFactory] = None,
        cache: Optional[CappedMemoryCache] = None,
    ) -> None:
        self._config = config
        factory = client_factory if client_factory is not None else SharePointClientFactory()
        self._client: RemoteClient = factory.get_client(
            config.host,
            config.credentials,
            config.document_library,
        )
        self._cache = cache if cache is not None else CappedMemoryCache(DEFAULT_CAPACITY)

    @classmethod
    def from_parameters(cls, parameters: Mapping[str, Any]) -> "SharePointStorage":
        """
        Create storage from mount parameters.

        Besides ``host``, ``documentLibrary``, ``user`` and ``password`` the
        mapping may carry ``client_factory`` and ``cache`` overrides.

        Raises:
            ConfigurationError: on an illegal library name or missing credentials.
        """
        config = StorageConfig.from_parameters(parameters)
        return cls(
            config,
            client_factory=parameters.get("client_factory"),
            cache=parameters.get("cache"),
        )

    @property
    def config(self) -> StorageConfig:
        return self._config

    def get_id(self) -> str:
        """Identical for every instance built from the same host, library and user."""
        return "::".join(
            (
                "SharePoint",
                self._config.host,
                self._config.document_library,
                self._config.user,
            )
        )

    # ----------------------------
    # Directories
    # ----------------------------
    def mkdir(self, path: str) -> bool:
        remote_path = self._remote_path(path)
        try:
            self._client.create_folder(remote_path)
        except SPStorageError as exc:
            logger.warning("mkdir %s failed: %s", remote_path, exc)
            return False

        self._invalidate(remote_path)
        return True

    def rmdir(self, path: str) -> bool:
        # Reports success without removing anything remotely.
        logger.debug("rmdir %s is not supported; nothing removed", path)
        return True

    def opendir(self, path: str) -> Optional[Iterator[str]]:
        """Return an iterator over visible child names, or None if unavailable."""
        remote_path = self._remote_path(path)
        try:
            listing = self._get_folder_contents(remote_path)
            names = [item.name for item in listing.items if not self._client.is_hidden(item)]
        except NotFoundError:
            return None
        except SPStorageError as exc:
            logger.warning("opendir %s failed: %s", remote_path, exc)
            return None

        return iter(names)

    # ----------------------------
    # Metadata
    # ----------------------------
    def stat(self, path: str) -> Optional[StatResult]:
        """
        Return size and mtime of ``path``, or None.

        A missing modification time is a failure, not a partial result.
        """
        item = self._resolve(path)
        if item is None or item.last_modified is None:
            return None

        size = item.size if item.size is not None else SPACE_UNKNOWN
        return StatResult(
            size=size,
            mtime=to_timestamp(item.last_modified),
            # Not tracked remotely.
            atime=now_timestamp(),
        )

    def filetype(self, path: str) -> Optional[ItemKind]:
        item = self._resolve(path)
        if item is None:
            return None
        return item.kind

    def file_exists(self, path: str) -> bool:
        # Remote failures and missing items look the same here.
        return self._resolve(path) is not None

    def is_dir(self, path: str) -> bool:
        return self.filetype(path) is ItemKind.FOLDER

    def is_file(self, path: str) -> bool:
        return self.filetype(path) is ItemKind.FILE

    def filesize(self, path: str) -> Optional[int]:
        stat = self.stat(path)
        return stat.size if stat is not None else None

    def filemtime(self, path: str) -> Optional[int]:
        stat = self.stat(path)
        return stat.mtime if stat is not None else None

    # ----------------------------
    # Mutation
    # ----------------------------
    def unlink(self, path: str) -> bool:
        """
        Delete a file or folder.

        The remote needs the kind up front, so a file delete is tried first
        and a folder delete only if that fails.
        """
        path = path.strip()
        if path in ("", "/"):
            return False

        remote_path = self._remote_path(path)
        if remote_path == self._remote_path(""):
            return False

        for as_file in (True, False):
            try:
                self._client.delete_object(remote_path, as_file)
            except SPStorageError as exc:
                logger.debug(
                    "Deleting %s as %s failed: %s",
                    remote_path,
                    "file" if as_file else "folder",
                    exc,
                )
                continue

            self._invalidate(remote_path)
            return True

        logger.warning("unlink %s failed", remote_path)
        return False

    def fopen(self, path: str, mode: str) -> None:
        logger.debug("fopen %s (%s) is not supported", path, mode)
        return None

    def touch(self, path: str, mtime: Optional[int] = None) -> bool:
        # Accepted without effect.
        return True

    # ----------------------------
    # Internals
    # ----------------------------
    def _remote_path(self, path: str) -> str:
        return to_remote_path(self._config.document_library, path)

    def _resolve(self, path: str) -> Optional[ItemDescriptor]:
        remote_path = self._remote_path(path)
        try:
            return self._get_file_or_folder(remote_path)
        except NotFoundError:
            return None
        except SPStorageError as exc:
            logger.warning("Lookup of %s failed: %s", remote_path, exc)
            return None

    def _get_folder_contents(self, remote_path: str) -> DirectoryListing:
        entry = self._cache.get(remote_path)
        if entry is not None and entry.children is not None:
            return entry.children

        logger.debug("Cache miss for children of %s", remote_path)
        folder = entry.instance if entry is not None else None
        listing = self._client.fetch_folder_contents(remote_path, None, folder)
        self._cache.set(remote_path, (entry or CacheEntry()).merge_children(listing))

        # Seed children so a later stat does not go remote again.
        for item in listing.items:
            child = self._cache.get(item.remote_path) or CacheEntry()
            if child.instance is None:
                self._cache.set(item.remote_path, child.merge_instance(item))

        return listing

    def _get_file_or_folder(self, remote_path: str) -> ItemDescriptor:
        entry = self._cache.get(remote_path)
        if entry is not None and entry.instance is not None:
            return entry.instance

        logger.debug("Cache miss for %s", remote_path)
        item = self._client.fetch_file_or_folder(remote_path)
        self._cache.set(remote_path, (entry or CacheEntry()).merge_instance(item))
        return item

    def _invalidate(self, remote_path: str) -> None:
        """Forget ``remote_path`` and the cached listing of its parent."""
        self._cache.remove(remote_path)

        parent = parent_remote_path(remote_path)
        entry = self._cache.get(parent)
        if entry is None or entry.children is None:
            return
        entry = entry.drop_children()
        if entry.is_empty:
            self._cache.remove(parent)
        else:
            self._cache.set(parent, entry)
