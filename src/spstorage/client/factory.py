"""Builds SharePoint clients from mount settings."""

from __future__ import annotations

from .sharepoint_client import SharePointClient


class SharePointClientFactory:
    """Default factory used by SharePointStorage when none is injected."""

    def get_client(
        self,
        host: str,
        credentials: dict[str, str],
        document_library: str,
    ) -> SharePointClient:
        return SharePointClient(site_url(host), credentials)


def site_url(host: str) -> str:
    """Return ``host`` as an absolute https URL without a trailing slash."""
    host = host.strip().rstrip("/")
    if "://" not in host:
        host = "https://" + host
    return host
