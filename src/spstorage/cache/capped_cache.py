"""Size-bounded in-memory cache of remote metadata."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Optional

from spstorage.models import DirectoryListing, ItemDescriptor

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY: int = 256


@dataclass(slots=True, frozen=True)
class CacheEntry:
    """
    Cached metadata for one server-relative URL.

    ``instance`` and ``children`` are filled independently; the merge helpers
    return a new entry and never drop the other slot.
    """

    instance: Optional[ItemDescriptor] = None
    children: Optional[DirectoryListing] = None

    def merge_instance(self, instance: ItemDescriptor) -> "CacheEntry":
        return replace(self, instance=instance)

    def merge_children(self, children: DirectoryListing) -> "CacheEntry":
        return replace(self, children=children)

    def drop_children(self) -> "CacheEntry":
        return replace(self, children=None)

    @property
    def is_empty(self) -> bool:
        return self.instance is None and self.children is None


class CappedMemoryCache:
    """
    Bounded mapping from server-relative URL to CacheEntry.

    Once ``capacity`` is exceeded the oldest inserted entries are evicted.
    Setting an existing key moves it to the newest position. A missing key
    means "fetch again", never "does not exist remotely".

    All methods hold an internal lock, so one cache may be shared by threads;
    read-modify-write sequences spanning several calls are not atomic.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if not isinstance(capacity, int) or capacity < 1:
            raise ValueError("capacity must be a positive integer")
        self._capacity = capacity
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while len(self._entries) > self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry %s", evicted)

    def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
