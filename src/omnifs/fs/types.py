"""Value types: FileInfo, DirEntry, Match."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from omnifs.handle import Handle


@dataclass
class FileInfo:
    """File/directory metadata returned by ``Backend.stat``."""

    path: str
    name: str
    is_directory: bool
    size_bytes: int | None = None
    modified_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class DirEntry:
    """One direct child reported by a directory listing."""

    name: str
    is_directory: bool


@dataclass(frozen=True, slots=True)
class Match:
    """A glob result: the matched handle plus one capture per wildcard segment.

    Attributes:
        handle: Handle of the matched file or directory.
        captures: Entry names matched by the wildcard segments, in
            left-to-right segment order. Empty for purely literal patterns.
    """

    handle: Handle
    captures: tuple[str, ...] = ()
