"""Glob pattern compiler.

A pattern is split on ``/`` into segments.  Each segment is either a
literal name or a wildcard expression built from:

- ``*``: zero or more characters
- ``?``: exactly one character
- ``[...]``: a character class with ranges (``a-z``) and a leading
  negation marker (``!`` or ``^``)
- ``\\x``: the character ``x`` taken literally

A trailing ``/`` restricts the final segment to directories.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .exceptions import InvalidPatternError
from .utils import split_scheme

PARENT_SEGMENT = ".."


@dataclass(frozen=True, slots=True)
class SegmentSpec:
    """One compiled path segment.

    Attributes:
        raw: Segment text as written in the pattern.
        literal: Unescaped name for literal segments, ``None`` for wildcards.
        matcher: Compiled full-match regex for wildcard segments.
        hint: Pattern handed to a backend as a listing pushdown hint.  Only
            set when the segment uses plain ``fnmatch`` syntax.
    """

    raw: str
    literal: str | None = None
    matcher: re.Pattern[str] | None = None
    hint: str | None = None

    @property
    def is_wildcard(self) -> bool:
        return self.matcher is not None

    def matches(self, name: str) -> bool:
        if self.matcher is None:
            return name == self.literal
        return self.matcher.fullmatch(name) is not None


@dataclass(frozen=True, slots=True)
class Pattern:
    """A compiled glob pattern.

    Attributes:
        raw: The pattern text passed to :func:`compile_pattern`.
        segments: Ordered segment specifications.
        dir_only: True when the raw pattern ended with a separator.
        root: Scheme/root text of an absolute pattern (``"/"``,
            ``"mem://"``, ``"file:///"``), ``None`` for relative patterns.
            A bare ``"/"`` root only applies when globbing from an invalid
            base; otherwise it is an ordinary separator.
    """

    raw: str
    segments: tuple[SegmentSpec, ...] = ()
    dir_only: bool = False
    root: str | None = None

    @property
    def is_absolute(self) -> bool:
        return self.root is not None

    @property
    def wildcard_count(self) -> int:
        return sum(1 for s in self.segments if s.is_wildcard)

    def literal_head(self) -> tuple[str, ...]:
        """Leading literal segment names, stopping at a wildcard or ``..``."""
        head: list[str] = []
        for seg in self.segments:
            if seg.is_wildcard or seg.literal == PARENT_SEGMENT:
                break
            head.append(seg.literal or "")
        return tuple(head)

    def __str__(self) -> str:
        return self.raw


def compile_pattern(raw: str) -> Pattern:
    """Compile *raw* into a :class:`Pattern`.

    Repeated separators collapse and ``.`` segments are dropped before
    compilation; ``..`` is kept as a literal segment.

    Raises:
        InvalidPatternError: On an unterminated or reversed character class
            or a dangling escape.  No partial pattern is produced.
    """
    scheme, rest = split_scheme(raw)
    root: str | None = None
    if scheme:
        root = scheme + ("/" if rest.startswith("/") else "")
    elif rest.startswith("/"):
        root = "/"

    parts = [p for p in rest.split("/") if p and p != "."]
    dir_only = rest.endswith("/") and (bool(parts) or root is not None)

    segments = tuple(_compile_segment(part, raw) for part in parts)
    return Pattern(raw=raw, segments=segments, dir_only=dir_only, root=root)


def compile_name_pattern(raw: str) -> SegmentSpec:
    """Compile a single-segment name filter (used by the directory walker)."""
    if "/" in raw:
        raise InvalidPatternError(raw, "name patterns cannot contain a separator")
    return _compile_segment(raw, raw)


def match_any(name: str, specs: tuple[SegmentSpec, ...]) -> bool:
    """True if *name* matches any of *specs*, or if *specs* is empty."""
    if not specs:
        return True
    return any(spec.matches(name) for spec in specs)


# =============================================================================
# Segment parsing
# =============================================================================


def _compile_segment(segment: str, pattern: str) -> SegmentSpec:
    regex: list[str] = []
    literal: list[str] = []
    wildcard = False
    fnmatch_compatible = True

    i = 0
    n = len(segment)
    while i < n:
        ch = segment[i]
        if ch == "\\":
            if i + 1 >= n:
                raise InvalidPatternError(pattern, "trailing escape character")
            fnmatch_compatible = False
            regex.append(re.escape(segment[i + 1]))
            literal.append(segment[i + 1])
            i += 2
        elif ch == "*":
            wildcard = True
            regex.append(".*")
            i += 1
        elif ch == "?":
            wildcard = True
            regex.append(".")
            i += 1
        elif ch == "[":
            wildcard = True
            expr, i, compatible = _parse_class(segment, i, pattern)
            fnmatch_compatible = fnmatch_compatible and compatible
            regex.append(expr)
        else:
            regex.append(re.escape(ch))
            literal.append(ch)
            i += 1

    if not wildcard:
        return SegmentSpec(raw=segment, literal="".join(literal))

    matcher = re.compile("".join(regex), re.DOTALL)
    return SegmentSpec(
        raw=segment,
        matcher=matcher,
        hint=segment if fnmatch_compatible else None,
    )


def _parse_class(segment: str, start: int, pattern: str) -> tuple[str, int, bool]:
    """Parse the bracket expression at *start*.

    Returns (regex, index after the closing bracket, fnmatch compatible).
    """
    i = start + 1
    n = len(segment)
    negate = False
    compatible = True
    if i < n and segment[i] in "!^":
        negate = True
        compatible = segment[i] == "!"
        i += 1

    members: list[str] = []
    first = True
    while True:
        if i >= n:
            raise InvalidPatternError(pattern, "unterminated character class")
        ch = segment[i]
        if ch == "]" and not first:
            i += 1
            break
        first = False
        if ch == "\\":
            if i + 1 >= n:
                raise InvalidPatternError(pattern, "unterminated character class")
            compatible = False
            ch = segment[i + 1]
            i += 2
        else:
            i += 1

        if i + 1 < n and segment[i] == "-" and segment[i + 1] != "]":
            hi = segment[i + 1]
            i += 2
            if hi == "\\":
                if i >= n:
                    raise InvalidPatternError(pattern, "unterminated character class")
                compatible = False
                hi = segment[i]
                i += 1
            if hi < ch:
                raise InvalidPatternError(pattern, f"reversed range {ch}-{hi}")
            members.append(f"{re.escape(ch)}-{re.escape(hi)}")
        else:
            members.append(re.escape(ch))

    return "[" + ("^" if negate else "") + "".join(members) + "]", i, compatible
