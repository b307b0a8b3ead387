"""Unit tests for bundle orchestration use-cases."""

from __future__ import annotations

import asyncio
import io
import zipfile

import pytest

from starter_bundler.application.modes import PackagingMode
from starter_bundler.application.results import ModuleResult
from starter_bundler.application.use_cases import (
    build_bundle,
    collect_modules,
    populate_archive,
)
from starter_bundler.archive.zip_assembler import ZipAssembler
from starter_bundler.config import default_libraries
from starter_bundler.errors import ArchiveAssemblyError, FetchFailure
from starter_bundler.schemas import PackageDescriptor

P5 = PackageDescriptor(name="p5")
EASING = PackageDescriptor.parse("@ff6347/p5-easing")


class _Source:
    """Serve prebuilt tarballs keyed by package name."""

    def __init__(self, tarballs: dict[str, bytes | Exception]) -> None:
        self.tarballs = tarballs

    async def resolve(self, descriptor: PackageDescriptor) -> str:
        return descriptor.full_name

    async def fetch(self, url: str) -> bytes:
        payload = self.tarballs[url]
        if isinstance(payload, Exception):
            raise payload
        return payload


class _RendezvousSource(_Source):
    """Hold every resolve until all packages have started resolving."""

    def __init__(self, tarballs: dict[str, bytes | Exception], expected: int) -> None:
        super().__init__(tarballs)
        self.expected = expected
        self.started = 0
        self.all_started = asyncio.Event()

    async def resolve(self, descriptor: PackageDescriptor) -> str:
        self.started += 1
        if self.started == self.expected:
            self.all_started.set()
        await self.all_started.wait()
        return descriptor.full_name


class _FailingAssembler(ZipAssembler):
    def finalize(self) -> bytes:
        raise ArchiveAssemblyError("zip writer exploded")


def _names(archive: bytes) -> set[str]:
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        return set(zf.namelist())


def _module(name: str, files: dict[str, bytes], version: str = "1.0.0") -> ModuleResult:
    return ModuleResult(name=name, version=version, files=files)


def test_collect_modules_settles_all_packages(make_tarball, make_manifest) -> None:
    """Every package yields a result, in configuration order."""
    source = _Source(
        {
            "p5": make_tarball({"package/package.json": make_manifest("p5")}),
            "@ff6347/p5-easing": FetchFailure("HTTP 500"),
        }
    )

    results = asyncio.run(collect_modules([P5, EASING], source))

    assert [result.name for result in results] == ["p5", "@ff6347/p5-easing"]
    assert results[0].version == "1.2.3"
    assert results[1].version == "error"


def test_collect_modules_runs_extractions_concurrently(make_tarball) -> None:
    """All extractions are in flight at once; one at a time would never finish."""
    source = _RendezvousSource(
        {
            "p5": make_tarball({"package/index.js": "p5"}),
            "@ff6347/p5-easing": make_tarball({"package/index.js": "easing"}),
        },
        expected=2,
    )

    async def run() -> list[ModuleResult]:
        return await asyncio.wait_for(collect_modules([P5, EASING], source), timeout=5)

    results = asyncio.run(run())

    assert source.started == 2
    assert [dict(result.files) for result in results] == [
        {"index.js": b"p5"},
        {"index.js": b"easing"},
    ]


def test_collect_modules_absorbs_unexpected_errors(make_tarball) -> None:
    """A crash in one extraction does not abort the others."""
    source = _Source(
        {
            "p5": make_tarball({"package/index.js": "x"}),
            "@ff6347/p5-easing": RuntimeError("boom"),
        }
    )

    results = asyncio.run(collect_modules([P5, EASING], source))

    assert results[0].version == "unknown"
    assert results[1] == ModuleResult.failure("@ff6347/p5-easing")


def test_populate_archive_full_mode() -> None:
    libraries = default_libraries()
    assembler = ZipAssembler()
    modules = [
        _module("p5", {"package.json": b"{}", "lib/p5.min.js": b"p5"}),
        ModuleResult.failure("@ff6347/p5-easing"),
    ]

    populate_archive(assembler, modules, PackagingMode.FULL, libraries)

    assert set(assembler.names()) == {
        ".editorconfig",
        ".vscode/extensions.json",
        ".vscode/settings.json",
        "index.html",
        "index.js",
        "modules/p5/package.json",
        "modules/p5/lib/p5.min.js",
    }


def test_populate_archive_minimal_mode() -> None:
    libraries = default_libraries()
    assembler = ZipAssembler()
    modules = [
        _module(
            "p5",
            {
                "package.json": b"{}",
                "lib/p5.min.js": b"p5",
                "lib/p5.js": b"p5 full",
                "lib/addons/p5.sound.min.js": b"sound",
            },
        ),
        _module("@ff6347/p5-easing", {"dist/p5.easing.min.js": b"easing"}),
    ]

    populate_archive(assembler, modules, PackagingMode.MINIMAL, libraries)

    assert set(assembler.names()) == {
        "index.html",
        "index.js",
        "lib/p5.min.js",
        "lib/p5.sound.min.js",
        "lib/p5.easing.min.js",
    }


def test_build_bundle_returns_archive_and_modules(make_tarball, make_manifest) -> None:
    source = _Source(
        {
            "p5": make_tarball(
                {
                    "package/package.json": make_manifest("p5"),
                    "package/lib/p5.min.js": "p5",
                }
            )
        }
    )

    result = asyncio.run(
        build_bundle(
            packages=[P5],
            mode=PackagingMode.MINIMAL,
            source=source,
            libraries=default_libraries(),
        )
    )

    assert result.mode is PackagingMode.MINIMAL
    assert [module.version for module in result.modules] == ["1.2.3"]
    assert _names(result.archive) == {"index.html", "index.js", "lib/p5.min.js"}


def test_build_bundle_with_no_packages_still_has_entry_points() -> None:
    result = asyncio.run(
        build_bundle(
            packages=[],
            mode=PackagingMode.FULL,
            source=_Source({}),
            libraries=default_libraries(),
        )
    )

    assert {"index.html", "index.js"} <= _names(result.archive)
    assert result.modules == ()


def test_build_bundle_propagates_assembly_errors(make_tarball) -> None:
    """Assembly is the one failure that aborts the whole request."""
    source = _Source({"p5": make_tarball({"package/index.js": "x"})})

    with pytest.raises(ArchiveAssemblyError, match="exploded"):
        asyncio.run(
            build_bundle(
                packages=[P5],
                mode=PackagingMode.FULL,
                source=source,
                libraries=default_libraries(),
                assembler=_FailingAssembler(),
            )
        )


def test_module_result_rejects_files_on_failure() -> None:
    with pytest.raises(ValueError, match="cannot carry files"):
        ModuleResult(name="p5", version="error", files={"a.js": b""})
