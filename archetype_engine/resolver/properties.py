"""``${name}`` token resolution and path transformation.

:func:`evaluate` is a single left-to-right pass over a template string.
Every ``${...}`` token is replaced by the value of the named property, or by
the empty string when the property is missing.  A token may carry a regex
rewrite suffix, ``${name/regex/replacement}``, in which case every match of
``regex`` in the value is replaced.  Substituted values are never re-scanned.

Example::

    evaluate("${package/\\./\\/}", {"package": "com.example"})  # "com/example"
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from archetype_engine.descriptor.models import Transformation


TOKEN_START = "${"
TOKEN_END = "}"


# ---------------------------------------------------------------------------
# Token evaluation
# ---------------------------------------------------------------------------


def evaluate(template: str, properties: Mapping[str, str]) -> str:
    """Resolve every ``${...}`` token of *template* against *properties*.

    An unterminated token (``${foo`` without a closing brace) is emitted
    verbatim together with the rest of the input.
    """
    out: list[str] = []
    pos = 0
    while True:
        start = template.find(TOKEN_START, pos)
        if start < 0:
            out.append(template[pos:])
            break
        end = template.find(TOKEN_END, start + len(TOKEN_START))
        if end < 0:
            out.append(template[pos:])
            break
        out.append(template[pos:start])
        out.append(_resolve_token(template[start + len(TOKEN_START):end], properties))
        pos = end + len(TOKEN_END)
    return "".join(out)


def _resolve_token(token: str, properties: Mapping[str, str]) -> str:
    name, rest = split_unescaped(token)
    value = properties.get(name)
    if value is None:
        return ""
    if rest is None:
        return value
    regex, replacement = split_unescaped(rest)
    return replace_all(
        value,
        _unescape_slashes(regex),
        _unescape_slashes(replacement or ""),
    )


def split_unescaped(text: str, separator: str = "/") -> tuple[str, str | None]:
    """Split *text* on the first *separator* not preceded by a backslash.

    Returns ``(head, tail)``; *tail* is ``None`` when no separator is found.
    """
    idx = 0
    while True:
        idx = text.find(separator, idx)
        if idx < 0:
            return text, None
        if idx > 0 and text[idx - 1] == "\\":
            idx += 1
            continue
        return text[:idx], text[idx + 1:]


def _unescape_slashes(text: str) -> str:
    return text.replace("\\/", "/")


# ---------------------------------------------------------------------------
# Regex replacement
# ---------------------------------------------------------------------------


def compile_replacement(replacement: str) -> Callable[[re.Match[str]], str]:
    """Compile a replacement string into a ``re.sub`` callback.

    ``$n`` inserts capture group *n* and ``\\x`` inserts a literal ``x``;
    every other character is copied as-is.
    """
    parts: list[str | int] = []
    literal: list[str] = []
    i = 0
    while i < len(replacement):
        ch = replacement[i]
        if ch == "\\" and i + 1 < len(replacement):
            literal.append(replacement[i + 1])
            i += 2
            continue
        if ch == "$" and i + 1 < len(replacement) and replacement[i + 1].isdigit():
            j = i + 1
            while j < len(replacement) and replacement[j].isdigit():
                j += 1
            if literal:
                parts.append("".join(literal))
                literal = []
            parts.append(int(replacement[i + 1:j]))
            i = j
            continue
        literal.append(ch)
        i += 1
    if literal:
        parts.append("".join(literal))

    def _expand(match: re.Match[str]) -> str:
        chunks: list[str] = []
        for part in parts:
            if isinstance(part, int):
                try:
                    chunks.append(match.group(part) or "")
                except IndexError:
                    chunks.append("")
            else:
                chunks.append(part)
        return "".join(chunks)

    return _expand


def replace_all(value: str, regex: str, replacement: str) -> str:
    """Replace every non-overlapping match of *regex* in *value*.

    An invalid *regex* leaves *value* unchanged.
    """
    try:
        compiled = re.compile(regex)
    except re.error:
        return value
    return compiled.sub(compile_replacement(replacement), value)


# ---------------------------------------------------------------------------
# Pipeline transformation
# ---------------------------------------------------------------------------


def transform(
    value: str,
    pipeline: Iterable["Transformation"],
    properties: Mapping[str, str],
) -> str:
    """Apply every replacement of *pipeline*, in order, to *value*.

    Each replacement string is first resolved with :func:`evaluate`, then
    used as a global regex substitution.
    """
    output = value
    for transformation in pipeline:
        for rep in transformation.replacements:
            output = replace_all(output, rep.regex, evaluate(rep.replacement, properties))
    return output
