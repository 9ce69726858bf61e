"""
Shared path utilities.

Contains path normalization, URI splitting and the SQL ``LIKE`` translation
used by the virtual backends (memory, database) and the registry.
"""

from __future__ import annotations

import posixpath

SCHEME_SEPARATOR = "://"

WILDCARD_CHARS = frozenset("*?[")

# =============================================================================
# Path Utilities
# =============================================================================


def normalize_path(path: str) -> str:
    """Normalize a virtual file system path.

    - Ensures leading /
    - Removes double slashes and ``.`` segments
    - Resolves ``..`` without climbing above the root
    - Removes trailing slash (except for root)

    Examples:
        normalize_path("foo.txt") -> "/foo.txt"
        normalize_path("/foo//bar.txt") -> "/foo/bar.txt"
        normalize_path("/foo/../bar.txt") -> "/bar.txt"
        normalize_path("/../bar.txt") -> "/bar.txt"
        normalize_path("/foo/") -> "/foo"
        normalize_path("") -> "/"
    """
    if not path:
        return "/"

    path = path.strip()

    if not path.startswith("/"):
        path = "/" + path

    path = posixpath.normpath(path)

    # posixpath keeps a leading double slash as-is
    if path.startswith("//"):
        path = "/" + path.lstrip("/")

    if path != "/" and path.endswith("/"):
        path = path[:-1]

    return path


def split_path(path: str) -> tuple[str, str]:
    """Split path into (parent_dir, filename).

    Examples:
        split_path("/foo/bar.txt") -> ("/foo", "bar.txt")
        split_path("/foo.txt") -> ("/", "foo.txt")
        split_path("/") -> ("/", "")
    """
    path = normalize_path(path)
    if path == "/":
        return "/", ""
    return posixpath.split(path)


def join_virtual(*parts: str) -> str:
    """Join path parts into one normalized virtual path."""
    return normalize_path("/".join(p for p in parts if p))


def has_scheme(uri: str) -> bool:
    """True when *uri* carries a ``scheme://`` part."""
    return SCHEME_SEPARATOR in uri


def split_scheme(uri: str) -> tuple[str, str]:
    """Split *uri* after the first ``://`` into (scheme_part, rest).

    Examples:
        split_scheme("mem://abc/x") -> ("mem://", "abc/x")
        split_scheme("/tmp/x") -> ("", "/tmp/x")
    """
    idx = uri.find(SCHEME_SEPARATOR)
    if idx < 0:
        return "", uri
    cut = idx + len(SCHEME_SEPARATOR)
    return uri[:cut], uri[cut:]


def has_wildcard(text: str) -> bool:
    """True when *text* contains a glob metacharacter."""
    return any(ch in WILDCARD_CHARS for ch in text)


# =============================================================================
# SQL Pushdown
# =============================================================================


def glob_to_sql_like(pattern: str) -> str | None:
    """Translate a single-segment glob into a SQL ``LIKE`` expression.

    Only ``*`` and ``?`` have ``LIKE`` counterparts; ``%``, ``_`` and the
    escape character itself are escaped with a backslash.  Returns ``None``
    when the pattern uses character classes or escapes, which ``LIKE``
    cannot express.

    Examples:
        glob_to_sql_like("*.txt") -> "%.txt"
        glob_to_sql_like("file?_a") -> "file_\\_a"
        glob_to_sql_like("[ab]*") -> None
    """
    if "[" in pattern or "\\" in pattern:
        return None
    out: list[str] = []
    for ch in pattern:
        if ch == "*":
            out.append("%")
        elif ch == "?":
            out.append("_")
        elif ch in ("%", "_"):
            out.append("\\" + ch)
        else:
            out.append(ch)
    return "".join(out)
