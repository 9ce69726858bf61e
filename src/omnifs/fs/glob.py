"""Glob engine: segment-by-segment expansion of compiled patterns.

The candidate set is expanded one pattern segment at a time.  Each stage
is a generator over the previous stage, so matches stream out as soon as
they are found, a consumer that stops early causes no further backend
calls, and the output order equals breadth expansion in backend listing
order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .cancel import CancelToken
from .dispatch import bind_handle, call_backend, make_handle
from .pattern import PARENT_SEGMENT, Pattern, SegmentSpec, compile_pattern
from .types import DirEntry, Match

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterator

    from omnifs.handle import Handle

    from .protocol import Backend
    from .registry import Registry

    Candidate = tuple[Backend, str, tuple[str, ...]]

logger = logging.getLogger(__name__)


def glob(
    base: Handle | str,
    pattern: str | Pattern,
    *,
    registry: Registry | None = None,
    cancel: CancelToken | threading.Event | None = None,
    timeout: float | None = None,
    pushdown: bool = True,
) -> Iterator[Match]:
    """Lazily yield every :class:`Match` of *pattern*.

    Relative patterns are expanded below *base*, which must be an existing
    directory (otherwise there are no matches).  A leading ``/`` without a
    scheme is only a separator when *base* is valid.  Fully qualified
    patterns (``scheme://...``, or ``/...`` on an invalid base) ignore
    *base* and start from the root they name.  The empty pattern yields
    *base* itself without touching any backend.

    A string *pattern* is compiled before this function returns, so a
    malformed pattern raises :class:`InvalidPatternError` here and no
    iterator is produced.

    Iteration raises :class:`CancellationError` once *cancel* is set or
    *timeout* seconds have passed, and :class:`BackendError` if a backend
    call fails; matches yielded before stay valid.
    """
    compiled = pattern if isinstance(pattern, Pattern) else compile_pattern(pattern)
    handle, reg = bind_handle(base, registry)
    token = CancelToken.coerce(cancel, timeout)
    return _GlobRun(reg, token, pushdown).run(handle, compiled)


class _GlobRun:
    """State of one glob invocation."""

    def __init__(self, registry: Registry, token: CancelToken, pushdown: bool) -> None:
        self.registry = registry
        self.token = token
        self.pushdown = pushdown

    def run(self, base: Handle, pattern: Pattern) -> Iterator[Match]:
        self.token.raise_if_cancelled()

        if self._is_rooted(base, pattern):
            stream = self._start_absolute(pattern)
            head = len(pattern.literal_head())
        elif not pattern.segments:
            yield Match(handle=base, captures=())
            return
        else:
            stream = self._start_relative(base)
            head = 0

        remaining = pattern.segments[head:]
        for index, segment in enumerate(remaining):
            last = index == len(remaining) - 1
            if segment.is_wildcard:
                stream = self._expand_wildcard(stream, segment, last)
            else:
                stream = self._expand_literal(stream, segment, last)

        if pattern.dir_only:
            stream = self._directories(stream)

        for backend, path, captures in stream:
            self.token.raise_if_cancelled()
            yield Match(handle=make_handle(self.registry, backend, path), captures=captures)

    # ------------------------------------------------------------------
    # Start points
    # ------------------------------------------------------------------

    def _is_rooted(self, base: Handle, pattern: Pattern) -> bool:
        if pattern.root == "/":
            return not base.is_valid
        return pattern.is_absolute

    def _start_relative(self, base: Handle) -> Iterator[Candidate]:
        backend, path = base.resolve()
        info = call_backend(self.token, backend, "stat", path, backend.stat, path)
        if info is None or not info.is_directory:
            logger.debug("Glob base %s is not an existing directory", base)
            return
        yield backend, path, ()

    def _start_absolute(self, pattern: Pattern) -> Iterator[Candidate]:
        head = pattern.literal_head()
        root_uri = (pattern.root or "") + "/".join(head)
        backend, path = self.registry.resolve(root_uri)
        if backend is self.registry.invalid:
            logger.debug("No backend for glob root %r", root_uri)
            return
        info = call_backend(self.token, backend, "stat", path, backend.stat, path)
        if info is None:
            return
        if len(head) < len(pattern.segments) and not info.is_directory:
            return
        yield backend, path, ()

    # ------------------------------------------------------------------
    # Segment expansion
    # ------------------------------------------------------------------

    def _expand_literal(
        self, stream: Iterator[Candidate], segment: SegmentSpec, last: bool
    ) -> Iterator[Candidate]:
        name = segment.literal or ""
        for backend, path, captures in stream:
            self.token.raise_if_cancelled()
            if name == PARENT_SEGMENT:
                continue
            joined = call_backend(
                self.token, backend, "join_clean", path, backend.join_clean, path, name
            )
            info = call_backend(self.token, backend, "stat", joined, backend.stat, joined)
            if info is None:
                continue
            if not last and not info.is_directory:
                continue
            yield backend, joined, captures

    def _expand_wildcard(
        self, stream: Iterator[Candidate], segment: SegmentSpec, last: bool
    ) -> Iterator[Candidate]:
        hint = [segment.hint] if self.pushdown and segment.hint else None
        for backend, path, captures in stream:
            for entry in self._list(backend, path, hint):
                if not segment.matches(entry.name):
                    continue
                if not last and not entry.is_directory:
                    continue
                joined = call_backend(
                    self.token, backend, "join_clean", path, backend.join_clean, path, entry.name
                )
                yield backend, joined, (*captures, entry.name)

    def _directories(self, stream: Iterator[Candidate]) -> Iterator[Candidate]:
        for backend, path, captures in stream:
            info = call_backend(self.token, backend, "stat", path, backend.stat, path)
            if info is not None and info.is_directory:
                yield backend, path, captures

    def _list(self, backend: Backend, path: str, hint: list[str] | None) -> list[DirEntry]:
        entries: list[DirEntry] = []

        def visit(entry: DirEntry) -> bool:
            if self.token.cancelled:
                return False
            entries.append(entry)
            return True

        call_backend(self.token, backend, "list_dir", path, backend.list_dir, path, visit, hint)
        self.token.raise_if_cancelled()
        return entries
