"""Shared bundle-daemon core utilities."""

from __future__ import annotations

import time
from dataclasses import dataclass
from hashlib import sha256

import httpx

from starter_bundler.adapters.npm_registry import NpmRegistrySource
from starter_bundler.application.modes import PackagingMode
from starter_bundler.application.ports import PackageSource
from starter_bundler.application.results import ModuleResult
from starter_bundler.application.use_cases import build_bundle
from starter_bundler.config import BundlerSettings

ZIP_MEDIA_TYPE = "application/zip"


@dataclass(frozen=True)
class BundleRequest:
    """Normalized bundle request.

    Parameters
    ----------
    mode : PackagingMode, default=PackagingMode.FULL
        Archive layout to produce.
    timestamp_ms : int | None, default=None
        Milliseconds since the epoch used in the download filename.
        Defaults to the time the bundle is assembled.
    """

    mode: PackagingMode = PackagingMode.FULL
    timestamp_ms: int | None = None


@dataclass(frozen=True)
class BundleOutcome:
    """Bundle output metadata."""

    archive_bytes: bytes
    filename: str
    sha256: str
    size_bytes: int
    mode: PackagingMode
    modules: tuple[ModuleResult, ...]


def digest_bytes(data: bytes) -> str:
    """Compute SHA-256 digest for byte payload."""
    return sha256(data).hexdigest()


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def bundle_filename(project_name: str, mode: PackagingMode, timestamp_ms: int) -> str:
    """Return the download filename, e.g. ``p5-starter-1700000000000-full.zip``."""
    return f"{project_name}-{timestamp_ms}-{mode.value}.zip"


def parse_minimal_flag(value: str | None) -> bool:
    """Interpret the ``minimal`` query flag; absent means full packaging."""
    if value is None:
        return False
    return value.strip().lower() in {"true", "1", "yes", "on"}


def summarize_modules(modules: tuple[ModuleResult, ...]) -> str:
    """Render ``name@version`` pairs for the ``X-Bundle-Modules`` header."""
    return ", ".join(f"{module.name}@{module.version}" for module in modules)


async def assemble_bundle(
    request: BundleRequest,
    settings: BundlerSettings,
    source: PackageSource | None = None,
) -> BundleOutcome:
    """Fetch configured packages and assemble the starter archive.

    Opens a registry client for the duration of the call when ``source`` is
    not given.

    Raises
    ------
    ArchiveAssemblyError
        If the output archive cannot be serialized.
    """
    if source is None:
        async with httpx.AsyncClient(
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            return await assemble_bundle(
                request,
                settings,
                NpmRegistrySource(client, settings.registry_url),
            )

    result = await build_bundle(
        packages=settings.packages,
        mode=request.mode,
        source=source,
        libraries=settings.libraries,
        root_prefix=settings.archive_root_prefix,
    )
    timestamp = request.timestamp_ms if request.timestamp_ms is not None else now_ms()
    return BundleOutcome(
        archive_bytes=result.archive,
        filename=bundle_filename(settings.project_name, request.mode, timestamp),
        sha256=digest_bytes(result.archive),
        size_bytes=len(result.archive),
        mode=request.mode,
        modules=result.modules,
    )
