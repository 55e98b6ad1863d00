"""Descriptor-driven project scaffolding engine.

Given an archetype bundle (descriptor, resource manifest and resource files)
and property values, computes which resources are materialized, under which
transformed path, and whether each is rendered or copied verbatim.

Quick usage::

    from archetype_engine import ArchetypeEngine

    with ArchetypeEngine.from_path("quickstart", {"package": "com.acme"}) as engine:
        result = await engine.generate("/tmp/output")
"""

from archetype_engine.config import CollisionPolicy, EngineConfig
from archetype_engine.engine import ArchetypeEngine, EngineError, resolve_inputs

__version__ = "0.1.0"

__all__ = [
    "ArchetypeEngine",
    "CollisionPolicy",
    "EngineConfig",
    "EngineError",
    "resolve_inputs",
]
