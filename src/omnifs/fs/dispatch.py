"""Backend call dispatch shared by glob, walk and the recursive operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from omnifs.handle import Handle

from .exceptions import BackendError, OmniFSError
from .registry import Registry, default_registry

if TYPE_CHECKING:
    from collections.abc import Callable

    from .cancel import CancelToken
    from .protocol import Backend

logger = logging.getLogger(__name__)

T = TypeVar("T")


def call_backend(
    token: CancelToken,
    backend: Backend,
    operation: str,
    path: str,
    fn: Callable[..., T],
    *args: Any,
) -> T:
    """Run one backend call after a cancellation check.

    omnifs errors pass through; anything else the backend raises is
    wrapped into :class:`BackendError` with the original as ``__cause__``.
    """
    token.raise_if_cancelled()
    try:
        return fn(*args)
    except OmniFSError:
        raise
    except Exception as e:
        logger.error(
            "%s failed for %s%s: %s", operation, backend.prefix, path, e, exc_info=True
        )
        raise BackendError(
            f"{operation} failed for {backend.prefix}{path}: {e}",
            backend=backend,
            path=path,
        ) from e


def make_handle(registry: Registry, backend: Backend, path: str) -> Handle:
    """Build the handle for a clean backend-local *path*.

    *path* must come from the backend's own ``join_clean``, so the URI is
    already canonical and no further backend call is made.
    """
    if backend is registry.local:
        return Handle._canonical(path, registry)
    return Handle._canonical(backend.prefix + path, registry)


def bind_handle(base: Handle | str, registry: Registry | None) -> tuple[Handle, Registry]:
    """Return *base* as a handle bound to *registry* (default: its own)."""
    if isinstance(base, str):
        reg = registry if registry is not None else default_registry
        return Handle(base, registry=reg), reg
    if registry is None:
        return base, base.registry if base.registry is not None else default_registry
    if base.registry is registry:
        return base, registry
    return Handle(base.uri, registry=registry), registry
