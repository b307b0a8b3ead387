"""Packaging modes and the placement policy each one applies."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from starter_bundler.schemas import LibraryBundle

MODULES_ROOT = "modules"
LIB_ROOT = "lib"


class PlacementPolicy(Protocol):
    """Where package files land in the archive, and how markup refers to them."""

    def placement_path(self, module_name: str, file_path: str) -> str | None:
        """Return the archive path for a package file, or ``None`` to drop it."""

    def script_reference(self, library: LibraryBundle) -> str:
        """Return the ``src`` used by generated markup to load ``library``."""


@dataclass(frozen=True)
class FullPlacement:
    """Keep every package file under ``modules/<package>/``."""

    def placement_path(self, module_name: str, file_path: str) -> str | None:
        return f"{MODULES_ROOT}/{module_name}/{file_path}"

    def script_reference(self, library: LibraryBundle) -> str:
        return f"./{MODULES_ROOT}/{library.module}/{library.path}"


@dataclass(frozen=True)
class MinimalPlacement:
    """Keep only recognized library bundles, flattened under ``lib/``."""

    libraries: tuple[LibraryBundle, ...]

    def placement_path(self, module_name: str, file_path: str) -> str | None:
        del module_name
        for library in self.libraries:
            if library.filename in file_path:
                return f"{LIB_ROOT}/{library.filename}"
        return None

    def script_reference(self, library: LibraryBundle) -> str:
        return f"{LIB_ROOT}/{library.filename}"


class PackagingMode(StrEnum):
    """Archive layout selected per bundling request."""

    FULL = "full"
    MINIMAL = "minimal"

    @classmethod
    def from_flag(cls, minimal: bool) -> PackagingMode:
        return cls.MINIMAL if minimal else cls.FULL

    @property
    def includes_workspace_files(self) -> bool:
        """Whether editor and workspace settings ship with the project."""
        return self is PackagingMode.FULL

    def policy(self, libraries: Iterable[LibraryBundle]) -> PlacementPolicy:
        """Return the placement policy for this mode."""
        if self is PackagingMode.MINIMAL:
            return MinimalPlacement(libraries=tuple(libraries))
        return FullPlacement()
