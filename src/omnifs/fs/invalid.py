"""InvalidBackend: the backend of empty and unresolvable URIs."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

from .exceptions import InvalidBackendError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .protocol import ListVisitor
    from .types import FileInfo

INVALID_PREFIX = "invalid://"


class InvalidBackend:
    """A backend where every operation fails with :class:`InvalidBackendError`.

    The registry hands it out for the empty URI and for URIs whose scheme
    no registered backend owns, so callers get an explicit error instead of
    silently touching the local disk.
    """

    prefix = INVALID_PREFIX
    name = "invalid file system"

    def _fail(self, operation: str, path: str = "") -> NoReturn:
        raise InvalidBackendError(
            f"{operation} not possible on the invalid file system",
            backend=self,
            path=path,
        )

    def list_dir(
        self,
        path: str,
        visit: ListVisitor,
        patterns: Sequence[str] | None = None,
    ) -> None:
        self._fail("list_dir", path)

    def stat(self, path: str) -> FileInfo | None:
        self._fail("stat", path)

    def join_clean(self, *parts: str) -> str:
        self._fail("join_clean", "/".join(parts))

    def read_bytes(self, path: str) -> bytes:
        self._fail("read_bytes", path)

    def write_bytes(self, path: str, data: bytes) -> None:
        self._fail("write_bytes", path)

    def make_dir(self, path: str, parents: bool = False) -> None:
        self._fail("make_dir", path)

    def remove(self, path: str) -> None:
        self._fail("remove", path)

    def __repr__(self) -> str:
        return "InvalidBackend()"
