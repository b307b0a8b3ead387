"""npm registry adapter built on httpx."""

from __future__ import annotations

import logging

import httpx

from starter_bundler.config import DEFAULT_REGISTRY_URL
from starter_bundler.errors import FetchFailure, ResolutionFailure
from starter_bundler.schemas import PackageDescriptor

logger = logging.getLogger(__name__)


class NpmRegistrySource:
    """Resolve package versions against an npm registry and download tarballs."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        registry_url: str = DEFAULT_REGISTRY_URL,
    ) -> None:
        self._client = client
        self._registry_url = registry_url.rstrip("/")

    def metadata_url(self, descriptor: PackageDescriptor) -> str:
        """Return the version-metadata endpoint for ``descriptor``."""
        return f"{self._registry_url}/{descriptor.full_name}/{descriptor.version}"

    async def resolve(self, descriptor: PackageDescriptor) -> str:
        """Return the ``dist.tarball`` URL for a package version.

        Parameters
        ----------
        descriptor : PackageDescriptor
            Package to look up.

        Returns
        -------
        str
            Tarball download URL.

        Raises
        ------
        ResolutionFailure
            On transport errors, non-2xx responses, invalid JSON, or a missing
            tarball URL.
        """
        name = descriptor.full_name
        url = self.metadata_url(descriptor)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise ResolutionFailure(f"Failed to fetch metadata for {name}: {exc}") from exc
        if not response.is_success:
            raise ResolutionFailure(
                f"Failed to fetch metadata for {name}: HTTP {response.status_code}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ResolutionFailure(f"Invalid metadata for {name}: {exc}") from exc
        dist = payload.get("dist") if isinstance(payload, dict) else None
        tarball = dist.get("tarball") if isinstance(dist, dict) else None
        if not isinstance(tarball, str) or not tarball:
            raise ResolutionFailure(f"Metadata for {name} has no dist.tarball URL")
        return tarball

    async def fetch(self, url: str) -> bytes:
        """Download a package tarball.

        Raises
        ------
        FetchFailure
            On transport errors or non-2xx responses.
        """
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise FetchFailure(f"Failed to download tarball {url}: {exc}") from exc
        if not response.is_success:
            raise FetchFailure(
                f"Failed to download tarball {url}: HTTP {response.status_code}"
            )
        logger.debug("downloaded %s (%d bytes)", url, len(response.content))
        return response.content
