"""LocalBackend: direct access to the host filesystem."""

from __future__ import annotations

import fnmatch
import logging
import os
import stat as stat_module
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .types import DirEntry, FileInfo

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .protocol import ListVisitor

logger = logging.getLogger(__name__)

LOCAL_PREFIX = "file://"


class LocalBackend:
    """Pure local disk access backend.

    Owns the ``file://`` prefix and serves every URI without a scheme.
    Paths are host paths; relative paths are relative to the current
    working directory.

    Listings are sorted by name so that the output order of glob and walk
    is stable for a fixed tree.  OS errors propagate unchanged; the glob
    engine and walker wrap them into ``BackendError``.
    """

    prefix = LOCAL_PREFIX
    name = "local file system"

    # =========================================================================
    # Core protocol
    # =========================================================================

    def list_dir(
        self,
        path: str,
        visit: ListVisitor,
        patterns: Sequence[str] | None = None,
    ) -> None:
        with os.scandir(path or ".") as it:
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            if patterns and not any(fnmatch.fnmatchcase(entry.name, p) for p in patterns):
                continue
            try:
                is_dir = entry.is_dir()
            except OSError:
                # Vanished between scandir and is_dir
                logger.debug("Skipping unreadable entry %s", entry.path)
                continue
            if visit(DirEntry(name=entry.name, is_directory=is_dir)) is False:
                return

    def stat(self, path: str) -> FileInfo | None:
        try:
            st = os.stat(path or ".")
        except (FileNotFoundError, NotADirectoryError):
            return None
        is_dir = stat_module.S_ISDIR(st.st_mode)
        return FileInfo(
            path=path,
            name=os.path.basename(path.rstrip(os.sep)) or path,
            is_directory=is_dir,
            size_bytes=None if is_dir else st.st_size,
            modified_at=datetime.fromtimestamp(st.st_mtime, tz=UTC),
        )

    def join_clean(self, *parts: str) -> str:
        parts = tuple(p for p in parts if p)
        if not parts:
            return ""
        first = parts[0]
        if first.startswith(LOCAL_PREFIX):
            first = first[len(LOCAL_PREFIX):] or os.sep
        joined = os.path.normpath(os.path.join(first, *parts[1:]))
        # POSIX keeps a leading double separator; collapse it
        if joined.startswith(os.sep * 2):
            joined = os.sep + joined.lstrip(os.sep)
        return joined

    # =========================================================================
    # Capabilities
    # =========================================================================

    def read_bytes(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    def write_bytes(self, path: str, data: bytes) -> None:
        with open(path, "wb") as f:
            f.write(data)

    def make_dir(self, path: str, parents: bool = False) -> None:
        if parents:
            os.makedirs(path, exist_ok=True)
        else:
            os.mkdir(path)

    def remove(self, path: str) -> None:
        if os.path.isdir(path) and not os.path.islink(path):
            os.rmdir(path)
        else:
            os.remove(path)

    def __repr__(self) -> str:
        return "LocalBackend()"
