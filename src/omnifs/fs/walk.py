"""Recursive directory walker: pre-order traversal across any backend."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .cancel import CancelToken
from .dispatch import bind_handle, call_backend, make_handle
from .exceptions import DirectoryExpectedError, PathNotFoundError
from .pattern import compile_name_pattern, match_any

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable, Sequence

    from omnifs.handle import Handle

    from .protocol import Backend
    from .registry import Registry
    from .types import DirEntry

logger = logging.getLogger(__name__)


def walk(
    base: Handle | str,
    visit: Callable[[Handle, DirEntry], object],
    patterns: Sequence[str] | None = None,
    *,
    list_dirs: bool = True,
    registry: Registry | None = None,
    cancel: CancelToken | threading.Event | None = None,
    timeout: float | None = None,
) -> None:
    """Walk the tree below *base* depth-first, pre-order.

    For each directory, ``visit(handle, entry)`` is called for every direct
    entry whose name matches any of *patterns* (all entries when
    *patterns* is empty; directories only when *list_dirs*), in listing
    order.  Afterwards the walker descends into the entries that a fresh
    stat reports as directories.  Entries that vanished in the meantime
    are skipped.

    Any exception raised by *visit* aborts the walk and propagates
    unchanged.  Cancellation raises :class:`CancellationError`, backend
    failures :class:`BackendError`.

    Raises:
        InvalidPatternError: If a name pattern is malformed.
        PathNotFoundError: If *base* does not exist.
        DirectoryExpectedError: If *base* is not a directory.
    """
    specs = tuple(compile_name_pattern(p) for p in patterns or ())
    handle, reg = bind_handle(base, registry)
    token = CancelToken.coerce(cancel, timeout)
    token.raise_if_cancelled()

    backend, path = handle.resolve()
    info = call_backend(token, backend, "stat", path, backend.stat, path)
    if info is None:
        raise PathNotFoundError(f"Directory not found: {handle}")
    if not info.is_directory:
        raise DirectoryExpectedError(f"Not a directory: {handle}")

    # Pending directories; child paths are re-checked when popped
    stack: list[str] = []
    current: str | None = path
    while current is not None or stack:
        token.raise_if_cancelled()
        if current is None:
            candidate = stack.pop()
            child_info = call_backend(token, backend, "stat", candidate, backend.stat, candidate)
            if child_info is None:
                logger.debug("Skipping vanished entry %s%s", backend.prefix, candidate)
                continue
            if not child_info.is_directory:
                continue
            current = candidate

        entries = _list_all(token, backend, current)
        children: list[str] = []
        for entry in entries:
            token.raise_if_cancelled()
            child = call_backend(
                token, backend, "join_clean", current, backend.join_clean, current, entry.name
            )
            children.append(child)
            if entry.is_directory and not list_dirs:
                continue
            if match_any(entry.name, specs):
                visit(make_handle(reg, backend, child), entry)

        stack.extend(reversed(children))
        current = None


def _list_all(token: CancelToken, backend: Backend, path: str) -> list[DirEntry]:
    entries: list[DirEntry] = []

    def collect(entry: DirEntry) -> bool:
        if token.cancelled:
            return False
        entries.append(entry)
        return True

    call_backend(token, backend, "list_dir", path, backend.list_dir, path, collect, None)
    token.raise_if_cancelled()
    return entries
