"""Recursive operations and listing helpers built on the core primitives.

Each function takes handles and probes the owning backends for the
optional capabilities it needs.  Cross-backend copies are supported but
not atomic.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .cancel import CancelToken
from .dispatch import call_backend
from .exceptions import CapabilityNotSupportedError, PathNotFoundError
from .pattern import compile_name_pattern, match_any
from .protocol import SupportsMakeDir, SupportsRead, SupportsRemove, SupportsWrite
from .walk import walk

if TYPE_CHECKING:
    import threading
    from collections.abc import Sequence

    from omnifs.handle import Handle

    from .types import DirEntry

logger = logging.getLogger(__name__)


# =============================================================================
# Listing helpers
# =============================================================================


def list_dir_max(
    handle: Handle,
    n: int,
    patterns: Sequence[str] | None = None,
    *,
    cancel: CancelToken | threading.Event | None = None,
) -> list[DirEntry]:
    """Return at most *n* direct entries of *handle* matching *patterns*.

    A negative *n* returns all entries.  The listing is stopped as soon as
    *n* entries were collected.
    """
    specs = tuple(compile_name_pattern(p) for p in patterns or ())
    hints = [s.hint for s in specs if s.hint is not None]
    pushdown = hints if specs and len(hints) == len(specs) else None
    token = CancelToken.coerce(cancel)
    backend, path = handle.resolve()
    entries: list[DirEntry] = []
    if n == 0:
        return entries

    def collect(entry: DirEntry) -> bool:
        if token.cancelled:
            return False
        if match_any(entry.name, specs):
            entries.append(entry)
        return n < 0 or len(entries) < n

    call_backend(token, backend, "list_dir", path, backend.list_dir, path, collect, pushdown)
    token.raise_if_cancelled()
    return entries


def list_dir_sorted(
    handle: Handle,
    patterns: Sequence[str] | None = None,
) -> list[DirEntry]:
    """Return all direct entries matching *patterns*, sorted by name."""
    return sorted(list_dir_max(handle, -1, patterns), key=lambda e: e.name)


# =============================================================================
# Removal
# =============================================================================


def remove_recursive(
    handle: Handle,
    *,
    cancel: CancelToken | threading.Event | None = None,
) -> None:
    """Remove *handle* and, for a directory, everything below it."""
    token = CancelToken.coerce(cancel)
    backend, path = handle.resolve()
    if not isinstance(backend, SupportsRemove):
        raise CapabilityNotSupportedError(f"{backend.name} does not support removal")

    info = call_backend(token, backend, "stat", path, backend.stat, path)
    if info is None:
        raise PathNotFoundError(f"Not found: {handle}")

    if info.is_directory:
        found: list[Handle] = []
        walk(handle, lambda h, _entry: found.append(h), cancel=token)
        # Reversed pre-order puts every entry before its parent directory
        for child in reversed(found):
            _, child_path = child.resolve()
            call_backend(token, backend, "remove", child_path, backend.remove, child_path)

    call_backend(token, backend, "remove", path, backend.remove, path)
    logger.debug("Removed %s recursively", handle)


def remove_dir_contents(
    handle: Handle,
    patterns: Sequence[str] | None = None,
    *,
    cancel: CancelToken | threading.Event | None = None,
) -> None:
    """Remove the direct entries of *handle* whose names match *patterns*."""
    token = CancelToken.coerce(cancel)
    for entry in list_dir_max(handle, -1, patterns, cancel=token):
        remove_recursive(handle.join(entry.name), cancel=token)


# =============================================================================
# Copy
# =============================================================================


def copy_recursive(
    src: Handle,
    dest: Handle,
    *,
    cancel: CancelToken | threading.Event | None = None,
) -> None:
    """Copy the file or directory tree *src* to *dest*, possibly across backends."""
    token = CancelToken.coerce(cancel)
    src_backend, src_path = src.resolve()
    dest_backend, dest_path = dest.resolve()
    if not isinstance(src_backend, SupportsRead):
        raise CapabilityNotSupportedError(f"{src_backend.name} does not support reading")
    if not isinstance(dest_backend, SupportsWrite):
        raise CapabilityNotSupportedError(f"{dest_backend.name} does not support writing")

    info = call_backend(token, src_backend, "stat", src_path, src_backend.stat, src_path)
    if info is None:
        raise PathNotFoundError(f"Not found: {src}")

    if not info.is_directory:
        data = call_backend(
            token, src_backend, "read_bytes", src_path, src_backend.read_bytes, src_path
        )
        call_backend(
            token, dest_backend, "write_bytes", dest_path, dest_backend.write_bytes, dest_path, data
        )
        return

    if not isinstance(dest_backend, SupportsMakeDir):
        raise CapabilityNotSupportedError(
            f"{dest_backend.name} does not support creating directories"
        )
    call_backend(
        token, dest_backend, "make_dir", dest_path, dest_backend.make_dir, dest_path, True
    )
    for entry in list_dir_max(src, -1, cancel=token):
        copy_recursive(src.join(entry.name), dest.join(entry.name), cancel=token)
