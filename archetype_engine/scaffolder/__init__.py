"""Resource lookup, template rendering and output generation."""

from archetype_engine.scaffolder.generator import (
    GenerationError,
    GenerationResult,
    ResourceNotFoundError,
    generate,
)
from archetype_engine.scaffolder.loader import (
    DirectoryResourceLoader,
    ZipResourceLoader,
    open_loader,
    read_manifest,
)
from archetype_engine.scaffolder.templates import TemplateRenderer

__all__ = [
    "DirectoryResourceLoader",
    "GenerationError",
    "GenerationResult",
    "ResourceNotFoundError",
    "TemplateRenderer",
    "ZipResourceLoader",
    "generate",
    "open_loader",
    "read_manifest",
]
