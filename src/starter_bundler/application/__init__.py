"""Application-layer use-cases and result objects."""

from __future__ import annotations

from starter_bundler.application.modes import (
    FullPlacement,
    MinimalPlacement,
    PackagingMode,
    PlacementPolicy,
)
from starter_bundler.application.ports import PackageSource
from starter_bundler.application.results import BundleResult, ModuleResult

__all__ = [
    "BundleResult",
    "FullPlacement",
    "MinimalPlacement",
    "ModuleResult",
    "PackageSource",
    "PackagingMode",
    "PlacementPolicy",
]
