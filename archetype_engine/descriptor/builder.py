"""Two-pass descriptor builder.

Pass 1 validates a structured document (usually loaded from YAML) into flat
``Raw*`` models where every reference is a plain id string.  Pass 2 resolves
all ids against the declared properties and transformations in one sweep and
produces the immutable :class:`~archetype_engine.descriptor.models.ArchetypeDescriptor`.
Any unresolved id is fatal and raised as :class:`DescriptorError` before
generation can start.

Document shape::

    name: quickstart
    properties:
      - {id: package, value: com.example}
      - {id: maven, value: "true"}
    transformations:
      - id: mustache
        replacements:
          - {regex: '\\.mustache$', replacement: ''}
    template-sets:
      transformations: [mustache]
      sets:
        - directory: src/main/java
          includes: ['**/*.mustache']
          if: maven
    input-flow:
      - {type: input, property: package, text: Package, default: '${package}'}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import (
    MODEL_VERSION,
    ArchetypeDescriptor,
    Choice,
    FileSet,
    FileSets,
    Input,
    InputFlow,
    Property,
    Select,
    TemplateSets,
    Transformation,
)


class DescriptorError(Exception):
    """Raised when a descriptor document is invalid or references unknown ids."""


# ---------------------------------------------------------------------------
# Pass 1: flat intermediate form
# ---------------------------------------------------------------------------


def _split_ids(value: Any) -> Any:
    """Accept ``"a, b"`` as well as ``["a", "b"]`` for id lists."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class _Raw(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class RawConditional(_Raw):
    if_ids: list[str] = Field(default_factory=list, alias="if")
    unless_ids: list[str] = Field(default_factory=list, alias="unless")

    @field_validator("if_ids", "unless_ids", mode="before")
    @classmethod
    def split_conditions(cls, value: Any) -> Any:
        return _split_ids(value)


class RawFileSet(RawConditional):
    directory: Optional[str] = None
    includes: list[str] = Field(default_factory=list)
    excludes: list[str] = Field(default_factory=list)
    transformations: list[str] = Field(default_factory=list)

    @field_validator("transformations", mode="before")
    @classmethod
    def split_transformations(cls, value: Any) -> Any:
        return _split_ids(value)


class RawPathSets(_Raw):
    transformations: list[str] = Field(default_factory=list)
    sets: list[RawFileSet] = Field(default_factory=list)

    @field_validator("transformations", mode="before")
    @classmethod
    def split_transformations(cls, value: Any) -> Any:
        return _split_ids(value)


class RawInput(RawConditional):
    type: Literal["input"] = "input"
    property: str
    text: str = ""
    default: Optional[str] = None


class RawChoice(RawConditional):
    property: str
    text: str = ""


class RawSelect(RawConditional):
    type: Literal["select"] = "select"
    text: str = ""
    choices: list[RawChoice] = Field(default_factory=list)


class RawDescriptor(_Raw):
    model_version: str = Field(default=MODEL_VERSION, alias="model-version")
    name: str = ""
    properties: list[Property] = Field(default_factory=list)
    transformations: list[Transformation] = Field(default_factory=list)
    template_sets: Optional[RawPathSets] = Field(default=None, alias="template-sets")
    file_sets: Optional[RawPathSets] = Field(default=None, alias="file-sets")
    input_flow: list[Union[RawInput, RawSelect]] = Field(
        default_factory=list, alias="input-flow"
    )


# ---------------------------------------------------------------------------
# Pass 2: reference resolution
# ---------------------------------------------------------------------------


class _Resolver:
    """Resolves id strings against the declared entities of one document."""

    def __init__(self, raw: RawDescriptor) -> None:
        self.properties = _index(raw.properties, "property")
        self.transformations = _index(raw.transformations, "transformation")

    def property(self, prop_id: str, where: str) -> Property:
        try:
            return self.properties[prop_id]
        except KeyError:
            raise DescriptorError(f"Unknown property {prop_id} in {where}") from None

    def transformation(self, tr_id: str, where: str) -> Transformation:
        try:
            return self.transformations[tr_id]
        except KeyError:
            raise DescriptorError(f"Unknown transformation {tr_id} in {where}") from None

    def properties_of(self, ids: list[str], where: str) -> tuple[Property, ...]:
        return tuple(self.property(i, where) for i in ids)

    def transformations_of(self, ids: list[str], where: str) -> tuple[Transformation, ...]:
        return tuple(self.transformation(i, where) for i in ids)

    def file_set(self, raw: RawFileSet, where: str) -> FileSet:
        return FileSet(
            directory=raw.directory,
            includes=tuple(raw.includes),
            excludes=tuple(raw.excludes),
            transformations=self.transformations_of(raw.transformations, where),
            if_properties=self.properties_of(raw.if_ids, where),
            unless_properties=self.properties_of(raw.unless_ids, where),
        )

    def path_sets(self, raw: RawPathSets, cls: type, where: str) -> Any:
        return cls(
            transformations=self.transformations_of(raw.transformations, where),
            sets=tuple(self.file_set(s, f"{where}[{i}]") for i, s in enumerate(raw.sets)),
        )

    def flow_node(self, raw: Union[RawInput, RawSelect], where: str) -> Union[Input, Select]:
        conditions = {
            "if_properties": self.properties_of(raw.if_ids, where),
            "unless_properties": self.properties_of(raw.unless_ids, where),
        }
        if isinstance(raw, RawInput):
            return Input(
                property=self.writable_property(raw.property, where),
                text=raw.text,
                default_value=raw.default,
                **conditions,
            )
        return Select(text=raw.text, choices=tuple(
            self.choice(c, f"{where}.choices[{i}]") for i, c in enumerate(raw.choices)
        ), **conditions)

    def writable_property(self, prop_id: str, where: str) -> Property:
        """Resolve a property that an input-flow node is allowed to set."""
        prop = self.property(prop_id, where)
        if prop.readonly:
            raise DescriptorError(f"Property: {prop.id} is readonly")
        return prop

    def choice(self, raw: RawChoice, where: str) -> Choice:
        return Choice(
            property=self.writable_property(raw.property, where),
            text=raw.text,
            if_properties=self.properties_of(raw.if_ids, where),
            unless_properties=self.properties_of(raw.unless_ids, where),
        )


def _index(items: list[Any], kind: str) -> dict[str, Any]:
    indexed: dict[str, Any] = {}
    for item in items:
        if item.id in indexed:
            raise DescriptorError(f"Duplicate {kind} id: {item.id}")
        indexed[item.id] = item
    return indexed


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_descriptor(document: dict[str, Any]) -> ArchetypeDescriptor:
    """Validate *document* and resolve all of its id references.

    Raises:
        DescriptorError: On schema violations, duplicate ids, unknown ids,
            or an input or choice bound to a read-only property.
    """
    try:
        raw = RawDescriptor.model_validate(document)
    except ValidationError as exc:
        raise DescriptorError(f"Invalid archetype descriptor: {exc}") from exc

    resolver = _Resolver(raw)
    return ArchetypeDescriptor(
        model_version=raw.model_version,
        name=raw.name,
        properties=resolver.properties,
        transformations=resolver.transformations,
        template_sets=(
            resolver.path_sets(raw.template_sets, TemplateSets, "template-sets")
            if raw.template_sets is not None
            else None
        ),
        file_sets=(
            resolver.path_sets(raw.file_sets, FileSets, "file-sets")
            if raw.file_sets is not None
            else None
        ),
        input_flow=InputFlow(nodes=tuple(
            resolver.flow_node(node, f"input-flow[{i}]")
            for i, node in enumerate(raw.input_flow)
        )),
    )


def parse_descriptor(text: str, fmt: str = "yaml") -> ArchetypeDescriptor:
    """Parse descriptor *text* (``"yaml"`` or ``"json"``) and build it."""
    try:
        document = json.loads(text) if fmt == "json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DescriptorError(f"Cannot parse archetype descriptor: {exc}") from exc
    if not isinstance(document, dict):
        raise DescriptorError("Archetype descriptor must be a mapping")
    return build_descriptor(document)


def load_descriptor(path: str | Path) -> ArchetypeDescriptor:
    """Load a descriptor from a ``.yaml``, ``.yml`` or ``.json`` file."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Archetype descriptor not found: {file_path}")
    fmt = "json" if file_path.suffix.lower() == ".json" else "yaml"
    return parse_descriptor(file_path.read_text(encoding="utf-8"), fmt)
