"""omnifs: URI-addressed file handles across pluggable backends.

Glob and walk one tree API over local disk, in-memory trees and SQL
databases.
"""

__version__ = "0.1.0"

from omnifs.handle import INVALID_HANDLE, Handle
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
from omnifs.fs.glob import glob
from omnifs.fs.invalid import InvalidBackend
from omnifs.fs.local import LocalBackend
from omnifs.fs.memory import MemoryBackend
from omnifs.fs.operations import (
    copy_recursive,
    list_dir_max,
    list_dir_sorted,
    remove_dir_contents,
    remove_recursive,
)
from omnifs.fs.pattern import Pattern, compile_pattern
from omnifs.fs.protocol import (
    Backend,
    SupportsMakeDir,
    SupportsRead,
    SupportsRemove,
    SupportsWrite,
)
from omnifs.fs.registry import Registry, default_registry, register, resolve, unregister
from omnifs.fs.types import DirEntry, FileInfo, Match
from omnifs.fs.walk import walk

__all__ = [
    "INVALID_HANDLE",
    "Backend",
    "BackendError",
    "CancelToken",
    "CancellationError",
    "CapabilityNotSupportedError",
    "DatabaseBackend",
    "DirEntry",
    "DirectoryExpectedError",
    "FileInfo",
    "Handle",
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
    "SupportsMakeDir",
    "SupportsRead",
    "SupportsRemove",
    "SupportsWrite",
    "__version__",
    "compile_pattern",
    "copy_recursive",
    "default_registry",
    "glob",
    "list_dir_max",
    "list_dir_sorted",
    "register",
    "remove_dir_contents",
    "remove_recursive",
    "resolve",
    "unregister",
    "walk",
]
