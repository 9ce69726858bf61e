"""MemoryBackend: thread-safe in-memory directory tree."""

from __future__ import annotations

import fnmatch
import threading
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .types import DirEntry, FileInfo
from .utils import join_virtual, normalize_path, split_path

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .protocol import ListVisitor

MEMORY_SCHEME = "mem://"


# ---------------------------------------------------------------------------
#  Tree nodes
# ---------------------------------------------------------------------------


class _DirNode:
    __slots__ = ("children", "modified_at")

    def __init__(self) -> None:
        self.children: dict[str, _DirNode | _FileNode] = {}
        self.modified_at: datetime = datetime.now(UTC)


class _FileNode:
    __slots__ = ("data", "modified_at")

    def __init__(self, data: bytes) -> None:
        self.data: bytes = data
        self.modified_at: datetime = datetime.now(UTC)


# ---------------------------------------------------------------------------
#  MemoryBackend
# ---------------------------------------------------------------------------


class MemoryBackend:
    """In-memory backend registered under ``mem://<name>``.

    All structural access goes through one re-entrant lock.  Listings work
    on a snapshot of the children taken under the lock, so a visitor may
    mutate the tree (or another thread may) without breaking the listing.

    Errors use the builtin ``OSError`` subclasses (``FileNotFoundError``,
    ``NotADirectoryError``, ``IsADirectoryError``, ``FileExistsError``).
    """

    name = "memory file system"

    def __init__(self, name: str | None = None) -> None:
        self.id = name or uuid.uuid4().hex[:12]
        self.prefix = f"{MEMORY_SCHEME}{self.id}"
        self._root = _DirNode()
        self._lock = threading.RLock()

    # =========================================================================
    # Node lookup
    # =========================================================================

    def _lookup(self, path: str) -> _DirNode | _FileNode | None:
        node: _DirNode | _FileNode = self._root
        for part in normalize_path(path).split("/"):
            if not part:
                continue
            if not isinstance(node, _DirNode):
                return None
            child = node.children.get(part)
            if child is None:
                return None
            node = child
        return node

    def _parent_dir(self, path: str) -> tuple[_DirNode, str]:
        parent_path, name = split_path(path)
        if not name:
            raise FileExistsError(f"Root directory: {path}")
        parent = self._lookup(parent_path)
        if parent is None:
            raise FileNotFoundError(f"Parent directory not found: {parent_path}")
        if not isinstance(parent, _DirNode):
            raise NotADirectoryError(f"Not a directory: {parent_path}")
        return parent, name

    # =========================================================================
    # Core protocol
    # =========================================================================

    def list_dir(
        self,
        path: str,
        visit: ListVisitor,
        patterns: Sequence[str] | None = None,
    ) -> None:
        with self._lock:
            node = self._lookup(path)
            if node is None:
                raise FileNotFoundError(f"Directory not found: {path}")
            if not isinstance(node, _DirNode):
                raise NotADirectoryError(f"Not a directory: {path}")
            snapshot = sorted(
                (name, isinstance(child, _DirNode)) for name, child in node.children.items()
            )

        for name, is_dir in snapshot:
            if patterns and not any(fnmatch.fnmatchcase(name, p) for p in patterns):
                continue
            if visit(DirEntry(name=name, is_directory=is_dir)) is False:
                return

    def stat(self, path: str) -> FileInfo | None:
        path = normalize_path(path)
        with self._lock:
            node = self._lookup(path)
            if node is None:
                return None
            is_dir = isinstance(node, _DirNode)
            return FileInfo(
                path=path,
                name=split_path(path)[1],
                is_directory=is_dir,
                size_bytes=None if is_dir else len(node.data),  # type: ignore[union-attr]
                modified_at=node.modified_at,
            )

    def join_clean(self, *parts: str) -> str:
        if parts and parts[0].startswith(self.prefix):
            parts = (parts[0][len(self.prefix):], *parts[1:])
        return join_virtual(*parts)

    # =========================================================================
    # Capabilities
    # =========================================================================

    def read_bytes(self, path: str) -> bytes:
        with self._lock:
            node = self._lookup(path)
            if node is None:
                raise FileNotFoundError(f"File not found: {path}")
            if isinstance(node, _DirNode):
                raise IsADirectoryError(f"Is a directory: {path}")
            return node.data

    def write_bytes(self, path: str, data: bytes) -> None:
        with self._lock:
            parent, name = self._parent_dir(path)
            existing = parent.children.get(name)
            if isinstance(existing, _DirNode):
                raise IsADirectoryError(f"Is a directory: {path}")
            parent.children[name] = _FileNode(bytes(data))
            parent.modified_at = datetime.now(UTC)

    def make_dir(self, path: str, parents: bool = False) -> None:
        path = normalize_path(path)
        with self._lock:
            if parents:
                parent_path = split_path(path)[0]
                if parent_path != path:
                    existing = self._lookup(parent_path)
                    if existing is None:
                        self.make_dir(parent_path, parents=True)
                node = self._lookup(path)
                if isinstance(node, _DirNode):
                    return
            parent, name = self._parent_dir(path)
            if name in parent.children:
                raise FileExistsError(f"Already exists: {path}")
            parent.children[name] = _DirNode()
            parent.modified_at = datetime.now(UTC)

    def remove(self, path: str) -> None:
        with self._lock:
            parent, name = self._parent_dir(path)
            node = parent.children.get(name)
            if node is None:
                raise FileNotFoundError(f"Not found: {path}")
            if isinstance(node, _DirNode) and node.children:
                raise OSError(f"Directory not empty: {path}")
            del parent.children[name]
            parent.modified_at = datetime.now(UTC)

    # =========================================================================
    # Convenience
    # =========================================================================

    def add_files(self, files: Mapping[str, bytes | None]) -> None:
        """Create files (``bytes`` values) and directories (``None`` values).

        Parent directories are created as needed.
        """
        with self._lock:
            for path, data in files.items():
                if data is None:
                    self.make_dir(path, parents=True)
                    continue
                parent_path = split_path(path)[0]
                self.make_dir(parent_path, parents=True)
                self.write_bytes(path, data)

    def __repr__(self) -> str:
        return f"MemoryBackend(name={self.id!r})"
