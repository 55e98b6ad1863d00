"""Pydantic v2 models for a resolved archetype descriptor.

The descriptor is an immutable graph: every reference to a property or a
transformation has already been resolved to the declared object by
:mod:`archetype_engine.descriptor.builder`.  Nothing in this module performs
I/O or id lookups.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


MODEL_VERSION = "1.0"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Properties & Transformations
# ---------------------------------------------------------------------------

class Property(_Frozen):
    """A user-configurable property."""
    id: str = Field(..., min_length=1, description="Unique property id")
    description: str = Field(default="", description="Human-readable description")
    value: Optional[str] = Field(default=None, description="Default value, if any")
    exported: bool = Field(default=True, description="Whether the value is exposed to templates")
    readonly: bool = Field(default=False, description="Whether the value can be changed by input")

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, value: Any) -> Any:
        # YAML turns unquoted true/false and numbers into non-strings
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value


class Replacement(_Frozen):
    """A regex rewrite rule; the replacement may contain ``${property}`` tokens."""
    regex: str = Field(..., description="Regular expression to match")
    replacement: str = Field(default="", description="Replacement template")


class Transformation(_Frozen):
    """A named, ordered list of replacements."""
    id: str = Field(..., min_length=1)
    replacements: tuple[Replacement, ...] = Field(default=())


# ---------------------------------------------------------------------------
# Conditionals & File-sets
# ---------------------------------------------------------------------------

class Conditional(_Frozen):
    """Shared ``if`` / ``unless`` property lists."""
    if_properties: tuple[Property, ...] = Field(default=())
    unless_properties: tuple[Property, ...] = Field(default=())

    def applies(self, values: Mapping[str, str]) -> bool:
        """Evaluate this element's conditional against property *values*."""
        from archetype_engine.resolver.conditional import applies

        return applies(self.if_properties, self.unless_properties, values)


class FileSet(Conditional):
    """A conditional group of include/exclude patterns under a directory."""
    directory: Optional[str] = Field(default=None, description="Root directory of the set")
    includes: tuple[str, ...] = Field(default=())
    excludes: tuple[str, ...] = Field(default=())
    transformations: tuple[Transformation, ...] = Field(default=())


class PathSets(_Frozen):
    """A group of file-sets sharing base transformations."""
    transformations: tuple[Transformation, ...] = Field(default=())
    sets: tuple[FileSet, ...] = Field(default=())


class TemplateSets(PathSets):
    """File-sets whose resources are rendered through the template engine."""


class FileSets(PathSets):
    """File-sets whose resources are copied verbatim."""


# ---------------------------------------------------------------------------
# Input flow
# ---------------------------------------------------------------------------

class FlowNode(Conditional):
    text: str = Field(default="", description="Prompt text")


class Input(FlowNode):
    """Free-text input bound to a property."""
    kind: Literal["input"] = "input"
    property: Property
    default_value: Optional[str] = Field(
        default=None, description="Default, may reference other properties as ${name}"
    )


class Choice(FlowNode):
    """One boolean choice of a :class:`Select`."""
    kind: Literal["choice"] = "choice"
    property: Property


class Select(FlowNode):
    """A selection among boolean choices."""
    kind: Literal["select"] = "select"
    choices: tuple[Choice, ...] = Field(default=())


class InputFlow(_Frozen):
    nodes: tuple[Union[Input, Select], ...] = Field(default=())


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

class ArchetypeDescriptor(_Frozen):
    """Root of the descriptor graph."""
    model_version: str = Field(default=MODEL_VERSION)
    name: str = Field(default="")
    properties: dict[str, Property] = Field(default_factory=dict)
    transformations: dict[str, Transformation] = Field(default_factory=dict)
    template_sets: Optional[TemplateSets] = None
    file_sets: Optional[FileSets] = None
    input_flow: InputFlow = Field(default_factory=InputFlow)

    def default_values(self) -> dict[str, str]:
        """Return ``{id: value}`` for every property declaring a default."""
        return {
            prop.id: prop.value
            for prop in self.properties.values()
            if prop.value is not None
        }
