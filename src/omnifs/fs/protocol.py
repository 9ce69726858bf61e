"""Backend protocol: runtime-checkable interfaces.

Split into a core protocol and opt-in capability protocols so that a
backend only has to provide what the glob engine and the walker need:
one-level listing, stat and path joining.  Content access, directory
creation and removal are discovered by ``isinstance`` probing against the
``Supports*`` protocols.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .types import DirEntry, FileInfo

    ListVisitor = Callable[[DirEntry], bool | None]


@runtime_checkable
class Backend(Protocol):
    """Core interface every backend must implement.

    Paths passed to a backend are clean backend-local paths without the
    backend prefix.
    """

    @property
    def prefix(self) -> str:
        """URI prefix owned by this backend, e.g. ``"mem://3f2a"``."""
        ...

    @property
    def name(self) -> str:
        """Human readable name of the backend implementation."""
        ...

    def list_dir(
        self,
        path: str,
        visit: ListVisitor,
        patterns: Sequence[str] | None = None,
    ) -> None:
        """Call *visit* for every direct child of the directory *path*.

        A ``False`` return from *visit* stops the listing.  *patterns* is a
        pushdown hint: the backend may skip names matching none of them but
        is not required to filter, nor to filter exactly.
        """
        ...

    def stat(self, path: str) -> FileInfo | None:
        """Fresh existence/type check. ``None`` if *path* does not exist."""
        ...

    def join_clean(self, *parts: str) -> str:
        """Join path parts with the backend's separator and clean the result."""
        ...


@runtime_checkable
class SupportsRead(Protocol):
    """Opt-in: read a whole file."""

    def read_bytes(self, path: str) -> bytes: ...


@runtime_checkable
class SupportsWrite(Protocol):
    """Opt-in: create or overwrite a whole file."""

    def write_bytes(self, path: str, data: bytes) -> None: ...


@runtime_checkable
class SupportsMakeDir(Protocol):
    """Opt-in: directory creation."""

    def make_dir(self, path: str, parents: bool = False) -> None: ...


@runtime_checkable
class SupportsRemove(Protocol):
    """Opt-in: remove a file or an empty directory."""

    def remove(self, path: str) -> None: ...
