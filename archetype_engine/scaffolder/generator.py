"""Generation driver: materializes resolved resource plans into an output tree.

Each plan entry maps an absolute resource path (``/src/main/App.java.tmpl``)
to its transformation pipeline.  The output path is the resource path without
its leading separator, rewritten by every replacement of the pipeline in
order.  Template entries are rendered with the property map, file entries are
copied verbatim.

Entries are processed one at a time: blocking I/O is pushed to a worker thread
with ``asyncio.to_thread`` but never overlapped, so directory creation and
overwrites happen in plan order.  The first failure aborts the run.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from archetype_engine.config import EngineConfig
from archetype_engine.descriptor.models import Transformation
from archetype_engine.resolver.properties import transform
from archetype_engine.utils import print_step, print_success

ResourceLookup = Callable[[str], Union[bytes, str, None]]
TemplateRenderFn = Callable[[str, Mapping[str, str]], str]
Plan = Mapping[str, Sequence[Transformation]]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ResourceNotFoundError(Exception):
    """Raised when a planned resource cannot be located by the lookup."""

    def __init__(self, resource_path: str) -> None:
        self.resource_path = resource_path
        super().__init__(f"Resource not found: {resource_path}")


class GenerationError(Exception):
    """Raised when creating, reading, rendering or writing an output fails."""

    def __init__(self, resource_path: str, message: str) -> None:
        self.resource_path = resource_path
        super().__init__(f"{resource_path}: {message}")


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass
class GenerationResult:
    """Output files written by one generation run."""

    output_root: Path
    rendered: list[Path] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)

    @property
    def files(self) -> list[Path]:
        return [*self.rendered, *self.copied]

    def relative_files(self) -> list[str]:
        """Sorted POSIX paths of every written file, relative to the root."""
        return sorted(p.relative_to(self.output_root).as_posix() for p in self.files)


# ---------------------------------------------------------------------------
# Output paths
# ---------------------------------------------------------------------------


def output_path(
    resource_key: str,
    pipeline: Sequence[Transformation],
    properties: Mapping[str, str],
) -> str:
    """Compute the output-relative path of a plan entry."""
    resource_path = resource_key[1:] if resource_key.startswith("/") else resource_key
    return transform(resource_path, pipeline, properties)


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


async def generate(
    template_plan: Plan,
    file_plan: Plan,
    properties: Mapping[str, str],
    resource_lookup: ResourceLookup,
    template_renderer: TemplateRenderFn,
    output_root: str | Path,
    config: Optional[EngineConfig] = None,
) -> GenerationResult:
    """Render every template entry and copy every file entry under *output_root*.

    Args:
        template_plan: Resource path -> pipeline for resources to render.
        file_plan: Resource path -> pipeline for resources to copy.
        properties: Resolved property values (templates and ``${}`` tokens).
        resource_lookup: Returns raw content for a relative resource path,
            or ``None`` when it does not exist.
        template_renderer: ``(content, properties) -> rendered text``.
        output_root: Directory the tree is written to.
        config: Engine settings; only ``encoding`` and ``verbose`` are used.

    Raises:
        ResourceNotFoundError: A planned resource is missing.
        GenerationError: An output path outside *output_root*, or any
            directory, read, render, encode or write failure.
    """
    config = config or EngineConfig()
    root = Path(output_root)
    result = GenerationResult(output_root=root)

    for key, pipeline in template_plan.items():
        relative, target = _target(root, key, pipeline, properties)
        await _ensure_parent(key, target)
        raw = _fetch(key, resource_lookup)
        try:
            text = raw if isinstance(raw, str) else raw.decode(config.encoding)
            data = template_renderer(text, properties).encode(config.encoding)
        except (GenerationError, ResourceNotFoundError):
            raise
        except Exception as exc:
            raise GenerationError(key, f"cannot render template: {exc}") from exc
        await _write(key, target, data)
        result.rendered.append(target)
        if config.verbose:
            print_step(f"rendered {relative}")

    for key, pipeline in file_plan.items():
        relative, target = _target(root, key, pipeline, properties)
        await _ensure_parent(key, target)
        raw = _fetch(key, resource_lookup)
        try:
            data = raw.encode(config.encoding) if isinstance(raw, str) else raw
        except UnicodeEncodeError as exc:
            raise GenerationError(key, f"cannot encode resource: {exc}") from exc
        await _write(key, target, data)
        result.copied.append(target)
        if config.verbose:
            print_step(f"copied {relative}")

    if config.verbose:
        print_success(f"Generated {len(result.files)} files in {root}")
    return result


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _target(
    root: Path,
    key: str,
    pipeline: Sequence[Transformation],
    properties: Mapping[str, str],
) -> tuple[str, Path]:
    """Compute the output path of *key* and confine it to *root*."""
    relative = output_path(key, pipeline, properties)
    target = root / relative
    resolved_root = root.resolve()
    resolved = target.resolve()
    if (
        Path(relative).is_absolute()
        or resolved == resolved_root
        or not resolved.is_relative_to(resolved_root)
    ):
        raise GenerationError(key, f"output path {relative!r} is outside {root}")
    return relative, target


def _fetch(key: str, resource_lookup: ResourceLookup) -> Union[bytes, str]:
    resource_path = key[1:] if key.startswith("/") else key
    try:
        raw = resource_lookup(resource_path)
    except OSError as exc:
        raise GenerationError(key, f"cannot read resource: {exc}") from exc
    if raw is None:
        raise ResourceNotFoundError(resource_path)
    return raw


async def _ensure_parent(key: str, target: Path) -> None:
    try:
        await asyncio.to_thread(target.parent.mkdir, parents=True, exist_ok=True)
    except OSError as exc:
        raise GenerationError(key, f"cannot create directory {target.parent}: {exc}") from exc


async def _write(key: str, target: Path, data: bytes) -> None:
    try:
        await asyncio.to_thread(target.write_bytes, data)
    except OSError as exc:
        raise GenerationError(key, f"cannot write {target}: {exc}") from exc
