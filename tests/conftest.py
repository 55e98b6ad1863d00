"""Shared pytest fixtures for the archetype engine test suite.

Provides reusable fixtures for:
- A sample descriptor document and its built descriptor
- A sample resource manifest
- An archetype bundle written to a temporary directory
- Transformation helpers
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any

import pytest

from archetype_engine.descriptor import build_descriptor
from archetype_engine.descriptor.models import ArchetypeDescriptor, Replacement, Transformation
from archetype_engine.resolver.source_path import SourcePath


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

@pytest.fixture
def descriptor_document() -> dict[str, Any]:
    """A quickstart-style descriptor document (as loaded from YAML)."""
    return {
        "model-version": "1.0",
        "name": "quickstart-se",
        "properties": [
            {"id": "groupId", "value": "com.example"},
            {"id": "artifactId", "value": "quickstart"},
            {"id": "version", "value": "1.0-SNAPSHOT"},
            {"id": "name", "value": "quickstart project"},
            {"id": "package", "value": "com.example.quickstart"},
            {"id": "maven", "value": "true"},
            {"id": "gradle", "value": "false", "exported": False},
            {"id": "engineVersion", "value": "2.0.0", "exported": False, "readonly": True},
        ],
        "transformations": [
            {
                "id": "packaged",
                "replacements": [
                    {"regex": "__pkg__", "replacement": "${package/\\./\\/}"},
                ],
            },
            {
                "id": "mustache",
                "replacements": [{"regex": "\\.mustache$", "replacement": ""}],
            },
        ],
        "template-sets": {
            "transformations": "mustache",
            "sets": [
                {
                    "directory": "src/main/java",
                    "includes": ["**/*.mustache"],
                    "transformations": "packaged",
                },
                {"directory": ".", "includes": ["build.gradle.mustache"], "if": "gradle"},
                {"directory": ".", "includes": ["pom.xml.mustache"], "if": "maven"},
            ],
        },
        "file-sets": {
            "sets": [
                {
                    "directory": "src/main/java",
                    "excludes": ["**/*.mustache"],
                    "transformations": ["packaged"],
                },
                {"directory": "src/main/resources", "includes": ["**/*"]},
            ],
        },
        "input-flow": [
            {"type": "input", "property": "name", "text": "Project name", "default": "${name}"},
            {
                "type": "input",
                "property": "groupId",
                "text": "Project groupId",
                "default": "${groupId}",
                "if": "maven",
            },
            {
                "type": "select",
                "text": "Select a build system",
                "choices": [
                    {"property": "maven", "text": "Maven"},
                    {"property": "gradle", "text": "Gradle"},
                ],
            },
        ],
    }


@pytest.fixture
def descriptor(descriptor_document: dict[str, Any]) -> ArchetypeDescriptor:
    """The built (resolved) sample descriptor."""
    return build_descriptor(descriptor_document)


@pytest.fixture
def manifest() -> list[SourcePath]:
    """Resource manifest matching the sample descriptor."""
    return [
        SourcePath(p)
        for p in (
            "pom.xml.mustache",
            "build.gradle.mustache",
            "src/main/java/__pkg__/Main.java.mustache",
            "src/main/java/__pkg__/package-info.java",
            "src/main/resources/application.yaml",
            "README.md",
        )
    ]


# ---------------------------------------------------------------------------
# Transformations
# ---------------------------------------------------------------------------

@pytest.fixture
def strip_tmpl() -> Transformation:
    """Transformation removing a trailing ``.tmpl`` suffix."""
    return Transformation(id="strip", replacements=(Replacement(regex="\\.tmpl$", replacement=""),))


# ---------------------------------------------------------------------------
# Archetype bundle on disk
# ---------------------------------------------------------------------------

BUNDLE_DESCRIPTOR = textwrap.dedent(
    """\
    name: quickstart-se
    properties:
      - {id: groupId, value: com.example}
      - {id: artifactId, value: quickstart}
      - {id: name, value: quickstart project}
      - {id: package, value: com.example.quickstart}
      - {id: maven, value: true}
      - {id: gradle, value: false}
    transformations:
      - id: packaged
        replacements:
          - {regex: __pkg__, replacement: '${package/\\./\\/}'}
      - id: mustache
        replacements:
          - {regex: '\\.mustache$', replacement: ''}
    template-sets:
      transformations: [mustache]
      sets:
        - directory: src/main/java
          includes: ['**/*.mustache']
          transformations: [packaged]
        - {directory: ., includes: [pom.xml.mustache], if: maven}
        - {directory: ., includes: [build.gradle.mustache], if: gradle}
    file-sets:
      sets:
        - directory: src/main/resources
          includes: ['**/*']
    input-flow:
      - {type: input, property: name, text: Project name, default: '${artifactId} app'}
    """
)

BUNDLE_FILES: dict[str, str] = {
    "pom.xml.mustache": "<artifactId>{{ artifactId }}</artifactId>\n",
    "build.gradle.mustache": "group = '{{ groupId }}'\n",
    "src/main/java/__pkg__/Main.java.mustache": "package {{ package }};\n\nclass Main {}\n",
    "src/main/resources/application.yaml": "server:\n  port: {{ not_rendered }}\n",
    "README.md": "# readme\n",
}


@pytest.fixture
def archetype_dir(tmp_path: Path) -> Path:
    """Extracted archetype bundle: descriptor, manifest and resources."""
    root = tmp_path / "archetype"
    meta = root / "META-INF"
    meta.mkdir(parents=True)
    (meta / "archetype.yaml").write_text(BUNDLE_DESCRIPTOR, encoding="utf-8")
    (meta / "archetype-resources.txt").write_text(
        "\n".join(BUNDLE_FILES) + "\n", encoding="utf-8"
    )
    for rel, content in BUNDLE_FILES.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root
