"""Normalized resource paths and glob-style path matching.

A ``SourcePath`` is a slash-separated logical path broken into segments,
with ``.`` and empty segments removed.  Patterns follow the same segment
grammar: a segment may contain ``*`` (wildcard inside one segment) and a
segment that is exactly ``**`` matches zero or more whole segments.

Matching never raises on malformed patterns; a pattern that cannot match
simply returns ``False``.
"""

from __future__ import annotations

import functools
import os
from collections.abc import Iterable
from pathlib import Path


# ---------------------------------------------------------------------------
# Pattern constants
# ---------------------------------------------------------------------------

WILDCARD = "*"
DOUBLE_WILDCARD = "**"
DEFAULT_INCLUDES: tuple[str, ...] = ("**/*",)


# ---------------------------------------------------------------------------
# Segment parsing
# ---------------------------------------------------------------------------


def parse_segments(path: str) -> list[str]:
    """Split *path* on ``/`` dropping empty and ``.`` segments.

    Examples::

        parse_segments("/./abc//def/index.html") -> ["abc", "def", "index.html"]
        parse_segments("") -> []
    """
    if path is None:
        raise ValueError("path is None")
    return [token for token in path.split("/") if token and token != "."]


def parse_pattern(pattern: str) -> list[str]:
    """Split a pattern into segment patterns.

    A trailing ``/`` is shorthand for ``/**`` so that ``src/`` selects the
    whole ``src`` subtree.
    """
    if pattern.endswith("/"):
        pattern = pattern + DOUBLE_WILDCARD
    return parse_segments(pattern)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def wildcard_match(value: str, pattern: str) -> bool:
    """Test a single segment *value* against a segment *pattern*.

    The pattern is split on ``*`` into literal fragments.  The value must
    start with the first fragment (unless the pattern starts with ``*``),
    end with the last one (unless the pattern ends with ``*``) and contain
    every intermediate fragment in order.
    """
    if not pattern:
        return not value

    value_idx = 0
    pattern_idx = 0
    while True:
        wildcard_idx = pattern.find(WILDCARD, pattern_idx)
        expanding = pattern_idx > 0 and pattern[pattern_idx - 1] == WILDCARD
        if wildcard_idx < 0:
            fragment = pattern[pattern_idx:]
            remainder = value[value_idx:]
            if expanding:
                return remainder.endswith(fragment)
            return remainder == fragment

        if wildcard_idx > pattern_idx:
            fragment = pattern[pattern_idx:wildcard_idx]
            idx = value.find(fragment, value_idx)
            if expanding:
                if idx < value_idx:
                    return False
            elif idx != value_idx:
                return False
            value_idx = idx + len(fragment)
        pattern_idx = wildcard_idx + 1


def match_segments(
    segments: list[str] | tuple[str, ...],
    patterns: list[str] | tuple[str, ...],
) -> bool:
    """Match path *segments* against already-parsed segment *patterns*.

    An empty pattern list only matches a path with no segments.
    """
    if not patterns:
        return not segments
    return _match_from(segments, 0, patterns, 0)


def _match_from(
    segments: list[str] | tuple[str, ...],
    offset: int,
    patterns: list[str] | tuple[str, ...],
    p_offset: int,
) -> bool:
    expand = False
    while p_offset < len(patterns) and offset < len(segments):
        pattern = patterns[p_offset]
        if pattern == DOUBLE_WILDCARD:
            expand = True
        elif expand:
            # Backtrack: try the pattern tail at every later path offset.
            for j in range(offset, len(segments)):
                if wildcard_match(segments[j], pattern) and _match_from(
                    segments, j + 1, patterns, p_offset + 1
                ):
                    return True
            return False
        else:
            if not wildcard_match(segments[offset], pattern):
                return False
            offset += 1
        p_offset += 1

    # Path exhausted: leftover patterns may only be wildcards.
    return all(p in (DOUBLE_WILDCARD, WILDCARD) for p in patterns[p_offset:])


def matches(
    path: "SourcePath | str",
    includes: Iterable[str] | None = None,
    excludes: Iterable[str] | None = None,
) -> bool:
    """Composite include/exclude predicate.

    ``True`` when *path* matches at least one include pattern and no
    exclude pattern.  An empty include list means "match everything", an
    empty exclude list excludes nothing.
    """
    if not isinstance(path, SourcePath):
        path = SourcePath(path)
    return path.matches(includes, excludes)


# ---------------------------------------------------------------------------
# SourcePath
# ---------------------------------------------------------------------------


@functools.total_ordering
class SourcePath:
    """An immutable, normalized, segment-wise comparable resource path."""

    __slots__ = ("_segments",)

    def __init__(self, path: str | Path | list[str] | tuple[str, ...] = "") -> None:
        if isinstance(path, (list, tuple)):
            segments: list[str] = []
            for part in path:
                segments.extend(parse_segments(part))
        else:
            if isinstance(path, Path):
                path = path.as_posix()
            segments = parse_segments(path)
        self._segments: tuple[str, ...] = tuple(segments)

    @classmethod
    def relative_to(cls, directory: str | Path, file: str | Path) -> "SourcePath":
        """Build the path of *file* relative to *directory*."""
        return cls(Path(os.path.relpath(file, directory)))

    # -- Accessors ---------------------------------------------------------

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    def as_string(self, absolute: bool = True) -> str:
        """Join the segments with ``/``, prefixed by ``/`` when *absolute*."""
        joined = "/".join(self._segments)
        return "/" + joined if absolute else joined

    # -- Matching ----------------------------------------------------------

    def matches_pattern(self, pattern: str | None) -> bool:
        """Test this path against a single pattern."""
        if pattern is None:
            return False
        if pattern == "":
            return not self._segments
        return match_segments(self._segments, parse_pattern(pattern))

    def matches_any(self, patterns: Iterable[str] | None) -> bool:
        """``True`` if any of *patterns* matches this path."""
        if patterns is None:
            return False
        return any(self.matches_pattern(p) for p in patterns)

    def matches(
        self,
        includes: Iterable[str] | None = None,
        excludes: Iterable[str] | None = None,
    ) -> bool:
        """Composite include/exclude test, see :func:`matches`."""
        include_list = list(includes) if includes is not None else []
        if not include_list:
            include_list = list(DEFAULT_INCLUDES)
        return self.matches_any(include_list) and not self.matches_any(excludes)

    # -- Collection helpers ------------------------------------------------

    @staticmethod
    def filter(
        paths: Iterable["SourcePath"],
        includes: Iterable[str] | None = None,
        excludes: Iterable[str] | None = None,
    ) -> list["SourcePath"]:
        """Return the paths accepted by the include/exclude predicate, in order."""
        include_list = list(includes) if includes is not None else []
        exclude_list = list(excludes) if excludes is not None else []
        return [p for p in paths if p.matches(include_list, exclude_list)]

    @staticmethod
    def sort(paths: list["SourcePath"]) -> list["SourcePath"]:
        """Sort *paths* in place (segment-wise lexicographic) and return it."""
        paths.sort()
        return paths

    @classmethod
    def scan(cls, directory: str | Path) -> list["SourcePath"]:
        """List every regular file below *directory* as a relative SourcePath."""
        root = Path(directory)
        if not root.exists():
            return []
        found = [
            cls(p.relative_to(root))
            for p in root.rglob("*")
            if p.is_file()
        ]
        return cls.sort(found)

    # -- Dunder protocol ---------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourcePath):
            return NotImplemented
        return self._segments == other._segments

    def __lt__(self, other: "SourcePath") -> bool:
        if not isinstance(other, SourcePath):
            return NotImplemented
        return self._segments < other._segments

    def __hash__(self) -> int:
        return hash(self._segments)

    def __str__(self) -> str:
        return self.as_string(absolute=False)

    def __repr__(self) -> str:
        return f"SourcePath({self.as_string()!r})"
