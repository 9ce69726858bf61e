"""Registry: maps URI prefixes to backends."""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import TYPE_CHECKING

from .invalid import InvalidBackend
from .local import LocalBackend
from .utils import has_scheme

if TYPE_CHECKING:
    from .protocol import Backend

logger = logging.getLogger(__name__)


class Registry:
    """Registry of backends keyed by their URI prefix.

    Resolves URIs to ``(backend, clean_path)`` tuples by longest prefix.
    URIs without a ``scheme://`` part belong to the local backend; the
    empty URI and unknown schemes resolve to the invalid backend.

    Reads never lock: they use the current immutable snapshot of the prefix
    table.  Writers serialize on a lock and publish a fresh snapshot, so a
    concurrent :meth:`resolve` sees either the old or the new table, never
    a partial update.
    """

    def __init__(self, local: Backend | None = None) -> None:
        self.local: Backend = local if local is not None else LocalBackend()
        self.invalid = InvalidBackend()
        self._write_lock = threading.Lock()
        self._backends: MappingProxyType[str, Backend] = MappingProxyType(
            {self.local.prefix: self.local}
        )

    def register(self, backend: Backend) -> None:
        """Add *backend* under its prefix, replacing the previous owner."""
        with self._write_lock:
            table = dict(self._backends)
            previous = table.get(backend.prefix)
            if previous is not None and previous is not backend:
                logger.debug("Replacing backend %r for prefix %s", previous, backend.prefix)
            table[backend.prefix] = backend
            self._backends = MappingProxyType(table)

    def unregister(self, backend: Backend) -> None:
        """Remove *backend* if it still owns its prefix; otherwise no-op."""
        with self._write_lock:
            if self._backends.get(backend.prefix) is not backend:
                return
            table = dict(self._backends)
            del table[backend.prefix]
            self._backends = MappingProxyType(table)

    def get(self, prefix: str) -> Backend | None:
        """Return the backend registered for exactly *prefix*."""
        return self._backends.get(prefix)

    def backends(self) -> list[Backend]:
        """List all registered backends, sorted by prefix."""
        snapshot = self._backends
        return [snapshot[p] for p in sorted(snapshot)]

    def find(self, uri: str) -> tuple[Backend, str] | None:
        """Find the owner of *uri* by longest prefix.

        Returns ``(backend, remainder)`` with the raw text after the prefix,
        or ``None`` if no registered prefix matches.
        """
        snapshot = self._backends
        best: Backend | None = None
        best_len = -1
        for prefix, backend in snapshot.items():
            if len(prefix) <= best_len or not uri.startswith(prefix):
                continue
            rest = uri[len(prefix):]
            # '/datafile' must not match a backend at '/data'
            if rest and not prefix.endswith(("/", ":")) and not rest.startswith("/"):
                continue
            best = backend
            best_len = len(prefix)
        if best is None:
            return None
        return best, uri[best_len:]

    def owner(self, uri: str) -> Backend:
        """Return the backend *uri* belongs to, without cleaning its path."""
        if not uri:
            return self.invalid
        if not has_scheme(uri):
            return self.local
        found = self.find(uri)
        return self.invalid if found is None else found[0]

    def resolve(self, uri: str) -> tuple[Backend, str]:
        """Resolve *uri* to its backend and the backend-local clean path."""
        if not uri:
            return self.invalid, ""
        if not has_scheme(uri):
            return self.local, self.local.join_clean(uri)
        found = self.find(uri)
        if found is None:
            return self.invalid, ""
        backend, rest = found
        if backend is self.local and not rest:
            return backend, self.local.join_clean("/")
        return backend, backend.join_clean(rest)

    def canonical(self, uri: str) -> str:
        """Return the canonical string form of *uri*.

        Local paths are returned without the ``file://`` prefix; other
        backends as ``prefix + clean path``.  Unresolvable URIs are kept
        as given.
        """
        backend, path = self.resolve(uri)
        if backend is self.invalid:
            return uri
        if backend is self.local:
            return path
        return backend.prefix + path


default_registry = Registry()


def register(backend: Backend) -> None:
    """Register *backend* with the default registry."""
    default_registry.register(backend)


def unregister(backend: Backend) -> None:
    """Unregister *backend* from the default registry."""
    default_registry.unregister(backend)


def resolve(uri: str) -> tuple[Backend, str]:
    """Resolve *uri* with the default registry."""
    return default_registry.resolve(uri)
