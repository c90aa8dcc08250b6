"""Data model for remote document-library items."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class ItemKind(str, Enum):
    """Kind of a remote item; values match POSIX ``filetype`` strings."""

    FILE = "file"
    FOLDER = "dir"


@dataclass(slots=True, frozen=True)
class ItemDescriptor:
    """
    Metadata of one remote file or folder.

    Notes:
        - Descriptors are never mutated once cached; writes invalidate them.
        - ``handle`` is the vendor object the descriptor was built from. The
          remote client may reuse it to avoid a second lookup; it takes no part
          in equality.
    """

    kind: ItemKind
    remote_path: str
    name: str

    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    handle: Any = field(default=None, compare=False, repr=False)

    @property
    def is_folder(self) -> bool:
        return self.kind is ItemKind.FOLDER


@dataclass(slots=True, frozen=True)
class DirectoryListing:
    """Children of one remote folder, as fetched in a single round trip."""

    remote_path: str
    items: tuple[ItemDescriptor, ...] = ()
    handle: Any = field(default=None, compare=False, repr=False)
