"""Archetype engine facade.

Ties the pieces together for one archetype bundle:

1. Load the descriptor and the resource manifest through a resource loader.
2. Merge descriptor defaults and input-flow defaults into the caller's
   property values (caller values always win).
3. Resolve the template and file plans once.
4. ``await engine.generate(output_dir)`` to materialize the project.

Usage::

    from archetype_engine import ArchetypeEngine

    with ArchetypeEngine.from_path("quickstart.zip", {"package": "com.acme"}) as engine:
        result = await engine.generate("./my-project")
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from archetype_engine.config import EngineConfig
from archetype_engine.descriptor.builder import parse_descriptor
from archetype_engine.descriptor.models import ArchetypeDescriptor, Input
from archetype_engine.resolver.filesets import FileSetResolver, Plan
from archetype_engine.resolver.source_path import SourcePath
from archetype_engine.resolver.substitution import NotFoundAction, SubstitutionVariables
from archetype_engine.scaffolder.generator import GenerationResult, generate
from archetype_engine.scaffolder.loader import ResourceLoader, open_loader, read_manifest
from archetype_engine.scaffolder.templates import TemplateRenderer
from archetype_engine.utils import print_plan_table


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class EngineError(Exception):
    """Raised when an archetype bundle is missing a required resource."""


# ---------------------------------------------------------------------------
# Property resolution
# ---------------------------------------------------------------------------


def resolve_inputs(
    descriptor: ArchetypeDescriptor,
    overrides: Mapping[str, str],
) -> dict[str, str]:
    """Compute the full property map without prompting.

    Declared property defaults fill every id the caller did not set.  Then
    the input flow is walked in order: each applicable ``Input`` whose
    property was not set by the caller takes its default value, with
    ``${name}`` references expanded against the values known so far.
    ``Select`` choices keep their property defaults.
    """
    values = dict(overrides)
    for prop_id, value in descriptor.default_values().items():
        values.setdefault(prop_id, value)

    for node in descriptor.input_flow.nodes:
        if not node.applies(values):
            continue
        if isinstance(node, Input):
            if node.property.id in overrides or node.default_value is None:
                continue
            variables = SubstitutionVariables(values, not_found=NotFoundAction.COLLAPSE)
            values[node.property.id] = variables.resolve(node.default_value)
    return values


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ArchetypeEngine:
    """Resolves and generates one archetype bundle.

    Attributes:
        descriptor: The parsed archetype descriptor.
        properties: Fully resolved property values for this run.
        template_plan: Resource path -> pipeline for rendered resources.
        file_plan: Resource path -> pipeline for copied resources.
    """

    def __init__(
        self,
        loader: ResourceLoader,
        properties: Mapping[str, str],
        config: Optional[EngineConfig] = None,
    ) -> None:
        if properties is None:
            raise ValueError("properties is None")
        self.loader = loader
        self.config = config or EngineConfig()
        self.descriptor = self._load_descriptor()
        self.manifest = self._load_manifest()
        self.properties = resolve_inputs(self.descriptor, properties)

        resolver = FileSetResolver(on_collision=self.config.collision_hook())
        self.template_plan: Plan = resolver.resolve_sets(
            self.descriptor.template_sets, self.manifest, self.properties
        )
        self.file_plan: Plan = resolver.resolve_sets(
            self.descriptor.file_sets, self.manifest, self.properties
        )
        if self.config.verbose:
            print_plan_table(self.template_plan, title="Templates")
            print_plan_table(self.file_plan, title="Files")

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        properties: Mapping[str, str],
        config: Optional[EngineConfig] = None,
    ) -> "ArchetypeEngine":
        """Open an archetype directory or zip archive."""
        return cls(open_loader(path), properties, config)

    # -- Loading -----------------------------------------------------------

    def _load_descriptor(self) -> ArchetypeDescriptor:
        name = self.config.descriptor_resource
        raw = self.loader.load(name)
        if raw is None:
            raise EngineError(f"{name} not found")
        fmt = "json" if name.lower().endswith(".json") else "yaml"
        return parse_descriptor(raw.decode(self.config.encoding), fmt)

    def _load_manifest(self) -> list[SourcePath]:
        name = self.config.manifest_resource
        manifest = read_manifest(self.loader, name, self.config.encoding)
        if manifest is None:
            raise EngineError(f"{name} not found")
        return manifest

    # -- Generation --------------------------------------------------------

    async def generate(self, output_dir: str | Path) -> GenerationResult:
        """Materialize the resolved plans under *output_dir*."""
        return await generate(
            self.template_plan,
            self.file_plan,
            self.properties,
            self.loader.load,
            TemplateRenderer(),
            output_dir,
            config=self.config,
        )

    # -- Resource management ----------------------------------------------

    def close(self) -> None:
        self.loader.close()

    def __enter__(self) -> "ArchetypeEngine":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
