"""Public cache exports for spstorage."""

from __future__ import annotations

from .capped_cache import DEFAULT_CAPACITY, CacheEntry, CappedMemoryCache

__all__ = ["CacheEntry", "CappedMemoryCache", "DEFAULT_CAPACITY"]
