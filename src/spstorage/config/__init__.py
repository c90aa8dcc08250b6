"""Public config exports for spstorage."""

from __future__ import annotations

from .storage_config import StorageConfig

__all__ = ["StorageConfig"]
