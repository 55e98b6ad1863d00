"""Resolve conditional file-sets into a ``resource path -> pipeline`` plan.

File-sets are processed in declaration order.  A set is skipped when its
conditional does not apply or when it declares no directory.  Otherwise its
effective pipeline is the group's base transformations followed by the set's
own, and every manifest entry that passes the include/exclude patterns and
lives under the set's directory is written into the plan.  A later set
claiming the same path overwrites the earlier claim.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Optional

from archetype_engine.descriptor.models import FileSet, PathSets, Transformation

from .conditional import applies
from .source_path import SourcePath

Pipeline = list[Transformation]
Plan = dict[str, Pipeline]
CollisionHook = Callable[[str, Pipeline, Pipeline], None]


class FileSetCollisionError(Exception):
    """Raised in strict mode when two file-sets claim the same resource."""

    def __init__(self, path: str, previous: Pipeline, current: Pipeline) -> None:
        self.path = path
        self.previous = previous
        self.current = current
        super().__init__(
            f"Resource {path} is claimed by more than one file-set "
            f"({_ids(previous)} and {_ids(current)})"
        )


def _ids(pipeline: Pipeline) -> str:
    return "[" + ", ".join(t.id for t in pipeline) + "]"


def reject_collisions(path: str, previous: Pipeline, current: Pipeline) -> None:
    """Collision hook that turns any overlapping claim into an error."""
    raise FileSetCollisionError(path, previous, current)


class FileSetResolver:
    """Builds resource plans from file-sets, a manifest and property values.

    Args:
        on_collision: Optional hook called as ``(path, previous, current)``
            before a later file-set overwrites an earlier claim.  The default
            is to overwrite silently.
    """

    def __init__(self, on_collision: Optional[CollisionHook] = None) -> None:
        self.on_collision = on_collision

    def resolve(
        self,
        file_sets: Iterable[FileSet],
        base_transformations: Sequence[Transformation],
        manifest: Sequence[SourcePath],
        properties: Mapping[str, str],
    ) -> Plan:
        resolved: Plan = {}
        owners: dict[str, int] = {}
        for index, file_set in enumerate(file_sets):
            if not applies(file_set.if_properties, file_set.unless_properties, properties):
                continue
            if not file_set.directory:
                continue
            pipeline = list(base_transformations) + list(file_set.transformations)
            dir_prefix = SourcePath(file_set.directory).as_string()
            for path in SourcePath.filter(manifest, file_set.includes, file_set.excludes):
                key = path.as_string()
                if not key.startswith(dir_prefix):
                    continue
                if (
                    self.on_collision is not None
                    and key in resolved
                    and owners[key] != index
                ):
                    self.on_collision(key, resolved[key], pipeline)
                resolved[key] = pipeline
                owners[key] = index
        return resolved

    def resolve_sets(
        self,
        path_sets: Optional[PathSets],
        manifest: Sequence[SourcePath],
        properties: Mapping[str, str],
    ) -> Plan:
        """Resolve a whole template-set or file-set group (``None`` gives ``{}``)."""
        if path_sets is None:
            return {}
        return self.resolve(path_sets.sets, path_sets.transformations, manifest, properties)


def resolve_file_sets(
    file_sets: Iterable[FileSet],
    base_transformations: Sequence[Transformation],
    manifest: Sequence[SourcePath],
    properties: Mapping[str, str],
) -> Plan:
    """Resolve with the default last-writer-wins policy."""
    return FileSetResolver().resolve(file_sets, base_transformations, manifest, properties)
