"""Result model for stat calls."""

from __future__ import annotations

from dataclasses import dataclass

# Size reported when the remote does not know it (folders, mostly).
SPACE_UNKNOWN: int = -2


@dataclass(slots=True, frozen=True)
class StatResult:
    """Only size and mtime are meaningful; atime is synthesized."""

    size: int
    mtime: int
    atime: int
