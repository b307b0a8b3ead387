"""Application ports for registry access."""

from __future__ import annotations

from typing import Protocol

from starter_bundler.schemas import PackageDescriptor


class PackageSource(Protocol):
    """Resolve packages to tarball URLs and download them."""

    async def resolve(self, descriptor: PackageDescriptor) -> str:
        """Return the tarball URL for ``descriptor``; raise ``ResolutionFailure``."""

    async def fetch(self, url: str) -> bytes:
        """Return the archive bytes at ``url``; raise ``FetchFailure``."""
