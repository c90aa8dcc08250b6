"""Remote client exports for spstorage."""

from __future__ import annotations

from .base import RemoteClient, RemoteClientFactory
from .factory import SharePointClientFactory
from .sharepoint_client import SharePointClient

__all__ = [
    "RemoteClient",
    "RemoteClientFactory",
    "SharePointClient",
    "SharePointClientFactory",
]
