"""Public model exports for spstorage."""

from __future__ import annotations

from .item import DirectoryListing, ItemDescriptor, ItemKind
from .stat import SPACE_UNKNOWN, StatResult

__all__ = [
    "ItemKind",
    "ItemDescriptor",
    "DirectoryListing",
    "StatResult",
    "SPACE_UNKNOWN",
]
