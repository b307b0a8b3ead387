"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType

from starter_bundler.application.modes import PackagingMode
from starter_bundler.types import FileView

UNKNOWN_VERSION = "unknown"
ERROR_VERSION = "error"


@dataclass(frozen=True)
class ModuleResult:
    """Outcome of extracting one package.

    ``version`` is the manifest version, ``"unknown"`` when the package has
    no manifest, or ``"error"`` when extraction failed. Failed results never
    carry files.
    """

    name: str
    version: str
    files: FileView = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if self.version == ERROR_VERSION and self.files:
            raise ValueError("failed module results cannot carry files")

    @property
    def ok(self) -> bool:
        return self.version not in {UNKNOWN_VERSION, ERROR_VERSION}

    @property
    def failed(self) -> bool:
        return self.version == ERROR_VERSION

    @classmethod
    def failure(cls, name: str) -> ModuleResult:
        """Build the empty result reported for a package that failed."""
        return cls(name=name, version=ERROR_VERSION)


@dataclass(frozen=True)
class BundleResult:
    """Finished starter archive together with per-package outcomes."""

    archive: bytes
    modules: tuple[ModuleResult, ...]
    mode: PackagingMode
