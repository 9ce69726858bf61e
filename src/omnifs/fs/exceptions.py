"""Custom exception hierarchy for the omnifs filesystem layer."""

from __future__ import annotations


class OmniFSError(Exception):
    """Base exception for all omnifs errors."""


class InvalidPatternError(OmniFSError, ValueError):
    """Raised when a glob pattern has malformed wildcard syntax."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid glob pattern {pattern!r}: {reason}")


class BackendError(OmniFSError):
    """Raised when a backend call fails (I/O, permissions, unreachable store).

    The original exception is available as ``__cause__``.
    """

    def __init__(self, message: str, *, backend: object = None, path: str = "") -> None:
        self.backend = backend
        self.path = path
        super().__init__(message)


class InvalidBackendError(BackendError):
    """Raised by every operation of the invalid backend."""


class CancellationError(OmniFSError):
    """Raised when the caller cancelled the operation or its deadline passed."""


class PathNotFoundError(OmniFSError):
    """Raised when a file or directory path does not exist."""


class DirectoryExpectedError(OmniFSError):
    """Raised when a directory was required but the path is a file."""


class CapabilityNotSupportedError(OmniFSError):
    """Raised when a backend doesn't support a requested capability."""
