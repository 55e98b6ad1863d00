"""Pure resolution of archetype descriptors into resource plans.

Nothing in this package performs I/O; every function works on immutable
inputs and is safe to call from any thread.
"""

from archetype_engine.resolver.conditional import applies, parse_boolean
from archetype_engine.resolver.filesets import (
    FileSetCollisionError,
    FileSetResolver,
    reject_collisions,
    resolve_file_sets,
)
from archetype_engine.resolver.properties import evaluate, transform
from archetype_engine.resolver.source_path import SourcePath, matches, wildcard_match
from archetype_engine.resolver.substitution import (
    NotFoundAction,
    SubstitutionError,
    SubstitutionVariables,
)

__all__ = [
    "FileSetCollisionError",
    "FileSetResolver",
    "NotFoundAction",
    "SourcePath",
    "SubstitutionError",
    "SubstitutionVariables",
    "applies",
    "evaluate",
    "matches",
    "parse_boolean",
    "reject_collisions",
    "resolve_file_sets",
    "transform",
    "wildcard_match",
]
