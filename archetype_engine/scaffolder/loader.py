"""Resource lookup for archetype bundles.

An archetype bundle is either a plain directory or a zip archive holding the
descriptor, the resource manifest and the template/resource files.  Loaders
return raw bytes for a relative resource path, or ``None`` when the resource
does not exist; turning a miss into an error is the caller's decision.
"""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Optional, Protocol

from archetype_engine.resolver.source_path import SourcePath


class ResourceLoader(Protocol):
    """Anything that can fetch raw resource bytes by relative path."""

    def load(self, path: str) -> Optional[bytes]:
        ...

    def close(self) -> None:
        ...


# ---------------------------------------------------------------------------
# Directory bundles
# ---------------------------------------------------------------------------


class DirectoryResourceLoader:
    """Loads resources from an extracted archetype directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        if not self.root.is_dir():
            raise FileNotFoundError(f"Archetype directory not found: {self.root}")

    def load(self, path: str) -> Optional[bytes]:
        relative = SourcePath(path).as_string(absolute=False)
        candidate = self.root / relative
        if not candidate.is_file():
            return None
        return candidate.read_bytes()

    def close(self) -> None:
        return None

    def __enter__(self) -> "DirectoryResourceLoader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Zip bundles
# ---------------------------------------------------------------------------


class ZipResourceLoader:
    """Loads resources from a zip (or jar) archive."""

    def __init__(self, archive: str | Path) -> None:
        self.archive = Path(archive)
        self._zip = zipfile.ZipFile(self.archive)
        self._names = set(self._zip.namelist())

    def load(self, path: str) -> Optional[bytes]:
        name = SourcePath(path).as_string(absolute=False)
        if name not in self._names:
            return None
        return self._zip.read(name)

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "ZipResourceLoader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_loader(path: str | Path) -> DirectoryResourceLoader | ZipResourceLoader:
    """Return the loader matching *path*: a directory or a zip archive."""
    location = Path(path)
    if location.is_dir():
        return DirectoryResourceLoader(location)
    if location.is_file() and zipfile.is_zipfile(location):
        return ZipResourceLoader(location)
    raise FileNotFoundError(f"Not an archetype directory or archive: {location}")


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


def parse_manifest(text: str) -> list[SourcePath]:
    """Parse newline-separated resource paths, skipping blank lines."""
    return [SourcePath(line.strip()) for line in text.splitlines() if line.strip()]


def read_manifest(
    loader: ResourceLoader,
    name: str,
    encoding: str = "utf-8",
) -> Optional[list[SourcePath]]:
    """Load and parse the manifest resource *name*, or ``None`` if absent."""
    raw = loader.load(name)
    if raw is None:
        return None
    return parse_manifest(raw.decode(encoding))
