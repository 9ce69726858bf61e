"""Handle: URI identity for a file on any registered backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from omnifs.fs.exceptions import CapabilityNotSupportedError
from omnifs.fs.protocol import SupportsMakeDir, SupportsRead, SupportsRemove, SupportsWrite
from omnifs.fs.registry import Registry, default_registry
from omnifs.fs.utils import split_path

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable, Iterator, Sequence

    from omnifs.fs.cancel import CancelToken
    from omnifs.fs.pattern import Pattern
    from omnifs.fs.protocol import Backend
    from omnifs.fs.types import DirEntry, FileInfo, Match


@dataclass(frozen=True, slots=True)
class Handle:
    """Immutable reference to a path on a registered backend.

    The URI is canonicalized on construction: local paths are cleaned and
    lose a ``file://`` prefix, other backends become ``prefix + clean
    path``.  Equality and hashing use the canonical string only.

    Attributes:
        uri: Canonical URI.  Empty for :data:`INVALID_HANDLE`.
        registry: Registry used for resolution (excluded from equality).
            ``None`` means the default registry.
    """

    uri: str = ""
    registry: Registry | None = field(default=None, compare=False, hash=False, repr=False)

    def __post_init__(self) -> None:
        if self.uri:
            object.__setattr__(self, "uri", self._registry.canonical(self.uri))

    @classmethod
    def _canonical(cls, uri: str, registry: Registry | None) -> Handle:
        """Build a handle from an already canonical *uri* without backend calls."""
        handle = object.__new__(cls)
        object.__setattr__(handle, "uri", uri)
        object.__setattr__(handle, "registry", registry)
        return handle

    @property
    def _registry(self) -> Registry:
        return self.registry if self.registry is not None else default_registry

    def __str__(self) -> str:
        return self.uri

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self) -> tuple[Backend, str]:
        """Return ``(backend, backend-local clean path)``."""
        return self._registry.resolve(self.uri)

    @property
    def backend(self) -> Backend:
        return self.resolve()[0]

    @property
    def path(self) -> str:
        return self.resolve()[1]

    @property
    def is_valid(self) -> bool:
        return self._registry.owner(self.uri) is not self._registry.invalid

    @property
    def name(self) -> str:
        return split_path(self.path)[1] if self.is_valid else ""

    def with_uri(self, uri: str) -> Handle:
        """Return a handle for *uri* bound to the same registry."""
        return Handle(uri, registry=self.registry)

    def _child(self, backend: Backend, path: str) -> Handle:
        if backend is self._registry.local:
            return Handle._canonical(path, self.registry)
        return Handle._canonical(backend.prefix + path, self.registry)

    def join(self, *parts: str) -> Handle:
        """Join path parts onto this handle using the backend's rules."""
        backend, path = self.resolve()
        return self._child(backend, backend.join_clean(path, *parts))

    def parent(self) -> Handle:
        backend, path = self.resolve()
        return self._child(backend, backend.join_clean(path, ".."))

    # ------------------------------------------------------------------
    # Core backend operations
    # ------------------------------------------------------------------

    def stat(self) -> FileInfo | None:
        backend, path = self.resolve()
        return backend.stat(path)

    def exists(self) -> bool:
        return self.stat() is not None

    def is_dir(self) -> bool:
        info = self.stat()
        return info is not None and info.is_directory

    def list_dir(self, patterns: Sequence[str] | None = None) -> list[DirEntry]:
        """List direct children, filtered exactly by the name *patterns*."""
        from omnifs.fs.operations import list_dir_max

        return list_dir_max(self, -1, patterns)

    def glob(
        self,
        pattern: str | Pattern,
        *,
        cancel: CancelToken | threading.Event | None = None,
        timeout: float | None = None,
    ) -> Iterator[Match]:
        """Expand *pattern* relative to this handle. See :func:`omnifs.glob`."""
        from omnifs.fs.glob import glob

        return glob(self, pattern, registry=self._registry, cancel=cancel, timeout=timeout)

    def walk(
        self,
        visit: Callable[[Handle, DirEntry], object],
        patterns: Sequence[str] | None = None,
        *,
        list_dirs: bool = True,
        cancel: CancelToken | threading.Event | None = None,
        timeout: float | None = None,
    ) -> None:
        """Walk the tree below this handle. See :func:`omnifs.walk`."""
        from omnifs.fs.walk import walk

        walk(
            self,
            visit,
            patterns,
            list_dirs=list_dirs,
            registry=self._registry,
            cancel=cancel,
            timeout=timeout,
        )

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    def read_bytes(self) -> bytes:
        backend, path = self.resolve()
        if not isinstance(backend, SupportsRead):
            raise CapabilityNotSupportedError(f"{backend.name} does not support reading")
        return backend.read_bytes(path)

    def write_bytes(self, data: bytes) -> None:
        backend, path = self.resolve()
        if not isinstance(backend, SupportsWrite):
            raise CapabilityNotSupportedError(f"{backend.name} does not support writing")
        backend.write_bytes(path, data)

    def make_dir(self, parents: bool = False) -> None:
        backend, path = self.resolve()
        if not isinstance(backend, SupportsMakeDir):
            raise CapabilityNotSupportedError(
                f"{backend.name} does not support creating directories"
            )
        backend.make_dir(path, parents=parents)

    def remove(self) -> None:
        backend, path = self.resolve()
        if not isinstance(backend, SupportsRemove):
            raise CapabilityNotSupportedError(f"{backend.name} does not support removal")
        backend.remove(path)


INVALID_HANDLE = Handle("")
"""The empty, unaddressable handle.  Every backend operation on it fails."""
