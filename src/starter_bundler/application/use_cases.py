"""Application use-cases orchestrating starter bundle assembly."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence

from starter_bundler.application.extractor import extract_package
from starter_bundler.application.modes import PackagingMode
from starter_bundler.application.ports import PackageSource
from starter_bundler.application.results import BundleResult, ModuleResult
from starter_bundler.application.templates import generated_files
from starter_bundler.archive.path_filter import DEFAULT_ROOT_PREFIX
from starter_bundler.archive.zip_assembler import ZipAssembler
from starter_bundler.schemas import LibraryBundle, PackageDescriptor

logger = logging.getLogger(__name__)


async def collect_modules(
    packages: Sequence[PackageDescriptor],
    source: PackageSource,
    *,
    root_prefix: str = DEFAULT_ROOT_PREFIX,
) -> list[ModuleResult]:
    """Use-case: extract every package concurrently and wait for all of them.

    One result is returned per package, in configuration order. A package
    that fails for any reason yields an empty ``version="error"`` result
    without affecting the others.
    """
    outcomes = await asyncio.gather(
        *(
            extract_package(descriptor, source, root_prefix=root_prefix)
            for descriptor in packages
        ),
        return_exceptions=True,
    )
    results: list[ModuleResult] = []
    for descriptor, outcome in zip(packages, outcomes, strict=True):
        if isinstance(outcome, ModuleResult):
            results.append(outcome)
            continue
        if not isinstance(outcome, Exception):
            raise outcome
        logger.error(
            "unexpected error extracting package %s",
            descriptor.full_name,
            exc_info=outcome,
        )
        results.append(ModuleResult.failure(descriptor.full_name))
    return results


def populate_archive(
    assembler: ZipAssembler,
    modules: Iterable[ModuleResult],
    mode: PackagingMode,
    libraries: Sequence[LibraryBundle],
) -> None:
    """Use-case: write generated files and placed package files.

    The same placement policy decides both where package files go and which
    paths the generated markup loads, so the two always agree.
    """
    policy = mode.policy(libraries)
    for path, content in generated_files(mode, policy, libraries).items():
        assembler.add(path, content)

    for module in modules:
        placed = 0
        for file_path in sorted(module.files):
            target = policy.placement_path(module.name, file_path)
            if target is None:
                continue
            assembler.add(target, module.files[file_path])
            placed += 1
        logger.debug(
            "placed %d of %d files from %s (%s mode)",
            placed,
            len(module.files),
            module.name,
            mode.value,
        )


async def build_bundle(
    *,
    packages: Sequence[PackageDescriptor],
    mode: PackagingMode,
    source: PackageSource,
    libraries: Sequence[LibraryBundle],
    root_prefix: str = DEFAULT_ROOT_PREFIX,
    assembler: ZipAssembler | None = None,
) -> BundleResult:
    """Use-case: fetch all packages and assemble the starter archive.

    Raises
    ------
    ArchiveAssemblyError
        If the zip archive cannot be serialized. Package failures never raise.
    """
    modules = await collect_modules(packages, source, root_prefix=root_prefix)
    assembler = assembler or ZipAssembler()
    populate_archive(assembler, modules, mode, libraries)
    archive = await asyncio.to_thread(assembler.finalize)
    logger.debug("archive entries: %s", ", ".join(assembler.names()))
    failed = [module.name for module in modules if module.failed]
    if failed:
        logger.warning("bundle assembled without packages: %s", ", ".join(failed))
    logger.info(
        "assembled %s bundle: %d entries, %d bytes",
        mode.value,
        len(assembler),
        len(archive),
    )
    return BundleResult(archive=archive, modules=tuple(modules), mode=mode)
