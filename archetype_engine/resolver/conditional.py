"""``if`` / ``unless`` gating of file-sets and input-flow nodes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from archetype_engine.descriptor.models import Property

PropertyRef = Union["Property", str]


def parse_boolean(value: str | None) -> bool:
    """``True`` only for a case-insensitive ``"true"``; anything else is ``False``."""
    return value is not None and value.lower() == "true"


def _property_id(ref: PropertyRef) -> str:
    return ref if isinstance(ref, str) else ref.id


def applies(
    if_properties: Iterable[PropertyRef] | None,
    unless_properties: Iterable[PropertyRef] | None,
    values: Mapping[str, str],
) -> bool:
    """Evaluate a conditional against resolved property *values*.

    Every ``if`` property must be boolean-true and every ``unless`` property
    must be boolean-false.  Missing values count as false.
    """
    for ref in if_properties or ():
        if not parse_boolean(values.get(_property_id(ref))):
            return False
    for ref in unless_properties or ():
        if parse_boolean(values.get(_property_id(ref))):
            return False
    return True
