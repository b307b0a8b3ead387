"""Shared pytest configuration, marker assignment and archive fixtures."""

from __future__ import annotations

import io
import json
import tarfile
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeAlias

import httpx
import pytest

REGISTRY_URL = "https://registry.test"

TarballFactory: TypeAlias = Callable[..., bytes]
RegistryFactory: TypeAlias = Callable[[Mapping[str, Mapping[str, object]]], httpx.MockTransport]


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


def build_tarball(
    files: Mapping[str, bytes | str | None],
    *,
    compress: bool = True,
) -> bytes:
    """Build a tar archive; ``None`` values become directory members."""
    buffer = io.BytesIO()
    mode = "w:gz" if compress else "w"
    with tarfile.open(fileobj=buffer, mode=mode) as archive:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            if content is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                archive.addfile(info)
                continue
            payload = content.encode("utf-8") if isinstance(content, str) else content
            info.size = len(payload)
            info.mode = 0o644
            archive.addfile(info, io.BytesIO(payload))
    return buffer.getvalue()


def manifest(name: str, version: str = "1.2.3") -> str:
    return json.dumps({"name": name, "version": version})


@pytest.fixture
def make_tarball() -> TarballFactory:
    """Return the tarball builder."""
    return build_tarball


@pytest.fixture
def make_manifest() -> Callable[..., str]:
    """Return a ``package.json`` payload builder."""
    return manifest


def _registry_transport(
    packages: Mapping[str, Mapping[str, object]],
) -> httpx.MockTransport:
    """Serve npm-style metadata and tarballs for ``packages``.

    Each package maps to options: ``tarball`` (bytes), ``metadata_status`` and
    ``tarball_status`` (ints, default 200), and ``metadata`` (raw JSON body
    override).
    """
    tarball_names = {
        name.replace("@", "").replace("/", "-"): name for name in packages
    }

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith("/-/tarballs/"):
            key = path.removeprefix("/-/tarballs/").removesuffix(".tgz")
            options = packages[tarball_names[key]]
            status = int(options.get("tarball_status", 200))
            if status != 200:
                return httpx.Response(status)
            return httpx.Response(200, content=options.get("tarball", b""))

        name, _, _version = path.lstrip("/").rpartition("/")
        options = packages.get(name)
        if options is None:
            return httpx.Response(404, json={"error": "Not found"})
        status = int(options.get("metadata_status", 200))
        if status != 200:
            return httpx.Response(status)
        if "metadata" in options:
            return httpx.Response(200, content=options["metadata"])
        safe = name.replace("@", "").replace("/", "-")
        return httpx.Response(
            200,
            json={
                "name": name,
                "dist": {"tarball": f"{REGISTRY_URL}/-/tarballs/{safe}.tgz"},
            },
        )

    return httpx.MockTransport(handler)


@pytest.fixture
def registry_transport() -> RegistryFactory:
    """Return a factory for mock npm registry transports."""
    return _registry_transport
