"""Recursive ``${name}`` substitution with configurable not-found handling.

This is a different facility from :func:`archetype_engine.resolver.properties.evaluate`:
substituted values are scanned again, ``\\${`` escapes a literal token start,
there is no regex suffix, and a missing variable can fail, be left as-is or
collapse to an empty string.

Every substitution, escape or skipped token is one step.  Running out of
steps after :data:`MAX_RECURSION_DEPTH` of them fails, even when the last
step consumed the final token.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Union


MAX_RECURSION_DEPTH = 32
TOKEN_START = "${"
TOKEN_END = "}"
ESCAPE_CHAR = "\\"

Source = Union[Mapping[str, str], Callable[[str], "str | None"]]


class SubstitutionError(Exception):
    """Raised when a substitution cannot be completed."""


class NotFoundAction(str, Enum):
    """What to do when no source provides a value for a variable."""
    FAIL = "fail"
    AS_IS = "as_is"
    COLLAPSE = "collapse"


def environment_source() -> Callable[[str], "str | None"]:
    """Source that reads ``os.environ`` by name, then by ``UPPER_SNAKE`` name."""

    def _lookup(name: str) -> str | None:
        value = os.environ.get(name)
        if value is None:
            value = os.environ.get(name.replace(".", "_").upper())
        return value

    return _lookup


class SubstitutionVariables:
    """Resolve ``${name}`` references against an ordered list of sources.

    Sources are mappings or ``name -> value | None`` callables; the first
    source returning a non-``None`` value wins.
    """

    def __init__(
        self,
        *sources: Source,
        not_found: NotFoundAction = NotFoundAction.FAIL,
    ) -> None:
        if not sources:
            raise ValueError("At least one variable source required")
        self.not_found = NotFoundAction(not_found)
        self._sources: list[Callable[[str], str | None]] = [
            source.get if isinstance(source, Mapping) else source
            for source in sources
        ]

    def lookup(self, name: str) -> str | None:
        for source in self._sources:
            value = source(name)
            if value is not None:
                return value
        return None

    def resolve(self, value: str) -> str:
        """Substitute every variable in *value*, rescanning substituted text."""
        original = value
        start_index = 0
        for _ in range(MAX_RECURSION_DEPTH):
            start = value.find(TOKEN_START, start_index)
            if start < 0:
                return value
            if start > 0 and value[start - 1] == ESCAPE_CHAR:
                value = value[:start - 1] + value[start:]
                start_index = start + 1
                continue
            end = value.find(TOKEN_END, start)
            if end < 0:
                raise SubstitutionError(f"Closing '}}' missing in \"{value}\"")
            key = value[start + len(TOKEN_START):end]
            substitute = self.lookup(key)
            if substitute is None:
                if self.not_found is NotFoundAction.AS_IS:
                    start_index = end
                    continue
                if self.not_found is NotFoundAction.FAIL:
                    raise SubstitutionError(
                        f"Substitution not found for \"{key}\" in \"{value}\""
                    )
                substitute = ""
            value = value[:start] + substitute + value[end + 1:]
        raise SubstitutionError(
            f"Max recursion ({MAX_RECURSION_DEPTH}) depth reached for \"{original}\""
        )
