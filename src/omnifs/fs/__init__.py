"""Filesystem layer: backends, registry, pattern compiler, capabilities."""

from omnifs.fs.cancel import CancelToken
from omnifs.fs.database import DatabaseBackend
from omnifs.fs.exceptions import (
    BackendError,
    CancellationError,
    CapabilityNotSupportedError,
    DirectoryExpectedError,
    InvalidBackendError,
    InvalidPatternError,
    OmniFSError,
    PathNotFoundError,
)
from omnifs.fs.invalid import InvalidBackend
from omnifs.fs.local import LocalBackend
from omnifs.fs.memory import MemoryBackend
from omnifs.fs.pattern import Pattern, SegmentSpec, compile_name_pattern, compile_pattern
from omnifs.fs.protocol import (
    Backend,
    SupportsMakeDir,
    SupportsRead,
    SupportsRemove,
    SupportsWrite,
)
from omnifs.fs.registry import Registry, default_registry, register, resolve, unregister
from omnifs.fs.types import DirEntry, FileInfo, Match

__all__ = [
    "Backend",
    "BackendError",
    "CancelToken",
    "CancellationError",
    "CapabilityNotSupportedError",
    "DatabaseBackend",
    "DirEntry",
    "DirectoryExpectedError",
    "FileInfo",
    "InvalidBackend",
    "InvalidBackendError",
    "InvalidPatternError",
    "LocalBackend",
    "Match",
    "MemoryBackend",
    "OmniFSError",
    "PathNotFoundError",
    "Pattern",
    "Registry",
    "SegmentSpec",
    "SupportsMakeDir",
    "SupportsRead",
    "SupportsRemove",
    "SupportsWrite",
    "compile_name_pattern",
    "compile_pattern",
    "default_registry",
    "register",
    "resolve",
    "unregister",
]
