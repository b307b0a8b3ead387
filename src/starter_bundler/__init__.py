"""Assemble downloadable p5.js starter projects from npm packages."""

from __future__ import annotations

from starter_bundler.application.modes import PackagingMode
from starter_bundler.application.results import BundleResult, ModuleResult
from starter_bundler.config import BundlerSettings, load_settings
from starter_bundler.schemas import LibraryBundle, PackageDescriptor

__version__ = "0.1.0"


async def build_starter_bundle(
    *,
    minimal: bool = False,
    settings: BundlerSettings | None = None,
) -> BundleResult:
    """Fetch configured packages and return the assembled starter archive.

    Parameters
    ----------
    minimal : bool, default=False
        Flatten recognized library bundles under ``lib/`` instead of shipping
        every package file under ``modules/``.
    settings : BundlerSettings | None, default=None
        Bundler configuration. Defaults to ``load_settings()``.

    Returns
    -------
    BundleResult
        Archive bytes plus per-package extraction results.
    """
    from starter_bundler.server.core import BundleRequest, assemble_bundle

    outcome = await assemble_bundle(
        BundleRequest(mode=PackagingMode.from_flag(minimal)),
        settings or load_settings(),
    )
    return BundleResult(
        archive=outcome.archive_bytes,
        modules=outcome.modules,
        mode=outcome.mode,
    )


__all__ = [
    "BundleResult",
    "BundlerSettings",
    "LibraryBundle",
    "ModuleResult",
    "PackageDescriptor",
    "PackagingMode",
    "build_starter_bundle",
    "load_settings",
]
