"""Archetype descriptor model and builder.

Usage::

    from archetype_engine.descriptor import load_descriptor

    descriptor = load_descriptor("archetype.yaml")
    print(descriptor.properties)
"""

from archetype_engine.descriptor.builder import (
    DescriptorError,
    build_descriptor,
    load_descriptor,
    parse_descriptor,
)
from archetype_engine.descriptor.models import (
    ArchetypeDescriptor,
    Choice,
    FileSet,
    FileSets,
    Input,
    InputFlow,
    Property,
    Replacement,
    Select,
    TemplateSets,
    Transformation,
)

__all__ = [
    "ArchetypeDescriptor",
    "Choice",
    "DescriptorError",
    "FileSet",
    "FileSets",
    "Input",
    "InputFlow",
    "Property",
    "Replacement",
    "Select",
    "TemplateSets",
    "Transformation",
    "build_descriptor",
    "load_descriptor",
    "parse_descriptor",
]
