"""Retrieve, decode and filter a single package."""

from __future__ import annotations

import json
import logging

from starter_bundler.application.ports import PackageSource
from starter_bundler.application.results import UNKNOWN_VERSION, ModuleResult
from starter_bundler.archive.path_filter import (
    DEFAULT_ROOT_PREFIX,
    normalize_member_path,
)
from starter_bundler.archive.tar_decoder import iter_tar_entries
from starter_bundler.errors import BundlerError, ManifestError
from starter_bundler.schemas import PackageDescriptor
from starter_bundler.types import FileCollection

logger = logging.getLogger(__name__)

MANIFEST_PATH = "package.json"


def collect_files(
    data: bytes, root_prefix: str = DEFAULT_ROOT_PREFIX
) -> FileCollection:
    """Decode a package tarball into its kept files.

    Later members overwrite earlier ones with the same normalized path.

    Raises
    ------
    ArchiveFormatError
        If the tarball is malformed.
    """
    files: FileCollection = {}
    for entry in iter_tar_entries(data):
        path = normalize_member_path(entry.path, root_prefix)
        if path is None:
            logger.debug("dropping tar member %s", entry.path)
            continue
        files[path] = entry.content
    return files


def manifest_version(files: FileCollection) -> str:
    """Return the manifest ``version`` field, or ``"unknown"``.

    Raises
    ------
    ManifestError
        If the manifest exists but is not a JSON object.
    """
    raw = files.get(MANIFEST_PATH)
    if raw is None:
        return UNKNOWN_VERSION
    try:
        manifest = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ManifestError(f"{MANIFEST_PATH} is not valid JSON: {exc}") from exc
    if not isinstance(manifest, dict):
        raise ManifestError(f"{MANIFEST_PATH} must contain a JSON object")
    version = manifest.get("version")
    if not isinstance(version, str) or not version.strip():
        return UNKNOWN_VERSION
    return version


async def extract_package(
    descriptor: PackageDescriptor,
    source: PackageSource,
    *,
    root_prefix: str = DEFAULT_ROOT_PREFIX,
) -> ModuleResult:
    """Run the resolve, fetch, decode and filter steps for one package.

    Failures are logged and reported as a ``version="error"`` result with no
    files; this coroutine never raises for ordinary errors.
    """
    name = descriptor.full_name
    try:
        url = await source.resolve(descriptor)
        logger.debug("resolved %s@%s to %s", name, descriptor.version, url)
        data = await source.fetch(url)
        files = collect_files(data, root_prefix)
        version = manifest_version(files)
    except BundlerError as exc:
        logger.warning(
            "failed to extract package %s (%s): %s", name, type(exc).__name__, exc
        )
        return ModuleResult.failure(name)
    except Exception:
        logger.exception("unexpected error extracting package %s", name)
        return ModuleResult.failure(name)
    logger.info("extracted %s@%s (%d files)", name, version, len(files))
    return ModuleResult(name=name, version=version, files=files)
