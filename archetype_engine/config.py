"""Archetype engine configuration.

Typed configuration for one engine run.  Settings use a Pydantic v2 model so
they are validated at construction time and can be serialised to/from JSON or
read from environment variables.  The config value is passed explicitly into
the generation entry points; nothing is kept in module-level state.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from archetype_engine.resolver.filesets import CollisionHook, reject_collisions


DEFAULT_DESCRIPTOR_RESOURCE = "META-INF/archetype.yaml"
DEFAULT_MANIFEST_RESOURCE = "META-INF/archetype-resources.txt"


class CollisionPolicy(str, Enum):
    """What to do when two file-sets claim the same resource."""
    OVERWRITE = "overwrite"
    REJECT = "reject"


class EngineConfig(BaseModel):
    """Settings for resolving and generating one archetype.

    Instances are typically created once by the caller and then passed to
    :class:`~archetype_engine.engine.ArchetypeEngine` and the generation
    driver.
    """

    verbose: bool = Field(default=False, description="Print generation progress")
    collision_policy: CollisionPolicy = Field(default=CollisionPolicy.OVERWRITE)
    encoding: str = Field(default="utf-8", description="Text encoding of templates")
    descriptor_resource: str = Field(default=DEFAULT_DESCRIPTOR_RESOURCE)
    manifest_resource: str = Field(default=DEFAULT_MANIFEST_RESOURCE)

    def collision_hook(self) -> Optional[CollisionHook]:
        """Return the file-set collision hook matching :attr:`collision_policy`."""
        if self.collision_policy is CollisionPolicy.REJECT:
            return reject_collisions
        return None

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "EngineConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build an ``EngineConfig`` from environment variables.

        Recognised variables (all optional):
            ARCHETYPE_VERBOSE, ARCHETYPE_COLLISION_POLICY, ARCHETYPE_ENCODING,
            ARCHETYPE_DESCRIPTOR, ARCHETYPE_MANIFEST.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("ARCHETYPE_VERBOSE"):
            kwargs["verbose"] = os.environ["ARCHETYPE_VERBOSE"].strip().lower() in (
                "1", "true", "yes", "on",
            )
        if os.environ.get("ARCHETYPE_COLLISION_POLICY"):
            kwargs["collision_policy"] = os.environ["ARCHETYPE_COLLISION_POLICY"].strip().lower()
        if os.environ.get("ARCHETYPE_ENCODING"):
            kwargs["encoding"] = os.environ["ARCHETYPE_ENCODING"]
        if os.environ.get("ARCHETYPE_DESCRIPTOR"):
            kwargs["descriptor_resource"] = os.environ["ARCHETYPE_DESCRIPTOR"]
        if os.environ.get("ARCHETYPE_MANIFEST"):
            kwargs["manifest_resource"] = os.environ["ARCHETYPE_MANIFEST"]
        return cls(**kwargs)
