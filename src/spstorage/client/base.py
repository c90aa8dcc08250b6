"""Contract of the remote client consumed by the storage adapter."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from spstorage.models import DirectoryListing, ItemDescriptor


class RemoteClient(Protocol):
    """
    Operations the storage adapter needs from a document-library client.

    Implementations raise ``NotFoundError`` when a path does not resolve and
    another ``SPStorageError`` for any other failure.
    """

    def create_folder(self, remote_path: str) -> ItemDescriptor:
        ...

    def fetch_folder_contents(
        self,
        remote_path: str,
        properties: Optional[Sequence[str]] = None,
        folder: Optional[ItemDescriptor] = None,
    ) -> DirectoryListing:
        """``folder`` is an already fetched descriptor whose handle may be reused."""
        ...

    def fetch_file_or_folder(
        self,
        remote_path: str,
        properties: Optional[Sequence[str]] = None,
        as_file: Optional[bool] = None,
    ) -> ItemDescriptor:
        """``as_file`` restricts the lookup to one kind; ``None`` tries file, then folder."""
        ...

    def delete_object(self, remote_path: str, as_file: bool) -> None:
        ...

    def is_hidden(self, item: ItemDescriptor) -> bool:
        ...


class RemoteClientFactory(Protocol):
    def get_client(
        self,
        host: str,
        credentials: dict[str, str],
        document_library: str,
    ) -> RemoteClient:
        ...
