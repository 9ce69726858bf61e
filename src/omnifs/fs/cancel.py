"""CancelToken: cooperative cancellation and deadlines for traversals."""

from __future__ import annotations

import threading
import time

from .exceptions import CancellationError


def _calc_deadline(timeout: float | None) -> float | None:
    if timeout is None:
        return None
    return time.monotonic() + max(0.0, timeout)


class CancelToken:
    """Thread-safe cancellation signal with an optional deadline.

    Traversals call :meth:`raise_if_cancelled` at the start of every
    iteration step and before every backend call.  Another thread cancels
    by calling :meth:`cancel`; a token created with *timeout* cancels
    itself once the deadline has passed.

    Usage::

        token = CancelToken(timeout=5.0)
        for match in glob(base, "*/data/*.csv", cancel=token):
            ...
    """

    def __init__(
        self,
        timeout: float | None = None,
        *,
        event: threading.Event | None = None,
    ) -> None:
        self._event = event if event is not None else threading.Event()
        self._deadline = _calc_deadline(timeout)
        self._reason = ""

    @classmethod
    def coerce(
        cls,
        cancel: CancelToken | threading.Event | None,
        timeout: float | None = None,
    ) -> CancelToken:
        """Build a token from an optional token or :class:`threading.Event`.

        An existing token is reused as-is unless *timeout* is given, in which
        case a child token sharing its event gets the new deadline.
        """
        if isinstance(cancel, CancelToken):
            if timeout is None:
                return cancel
            child = cls(timeout, event=cancel._event)
            if cancel._deadline is not None and child._deadline is not None:
                child._deadline = min(child._deadline, cancel._deadline)
            return child
        return cls(timeout, event=cancel)

    def cancel(self, reason: str = "") -> None:
        """Signal cancellation to every traversal holding this token."""
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def reason(self) -> str:
        if self._event.is_set():
            return self._reason or "operation cancelled"
        if self.cancelled:
            return "deadline exceeded"
        return ""

    def raise_if_cancelled(self) -> None:
        """Raise :class:`CancellationError` when the token is cancelled."""
        if self.cancelled:
            raise CancellationError(self.reason)
