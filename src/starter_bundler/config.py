"""Bundler settings and environment loading."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from starter_bundler.errors import ConfigurationError
from starter_bundler.schemas import LibraryBundle, PackageDescriptor

ENV_PREFIX = "STARTER_BUNDLER_"

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_PACKAGES = ("p5", "@ff6347/p5-easing")


def default_packages() -> list[PackageDescriptor]:
    """Return descriptors for the packages shipped in every starter project."""
    return [PackageDescriptor.parse(spec) for spec in DEFAULT_PACKAGES]


def default_libraries() -> list[LibraryBundle]:
    """Return the library bundles recognized by minimal packaging."""
    return [
        LibraryBundle(filename="p5.min.js", module="p5", path="lib/p5.min.js"),
        LibraryBundle(
            filename="p5.sound.min.js",
            module="p5",
            path="lib/addons/p5.sound.min.js",
            enabled=False,
        ),
        LibraryBundle(
            filename="p5.easing.min.js",
            module="@ff6347/p5-easing",
            path="dist/p5.easing.min.js",
            enabled=False,
        ),
    ]


class BundlerSettings(BaseModel):
    """Validated bundler configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    registry_url: str = DEFAULT_REGISTRY_URL
    packages: tuple[PackageDescriptor, ...] = Field(
        default_factory=lambda: tuple(default_packages())
    )
    libraries: tuple[LibraryBundle, ...] = Field(
        default_factory=lambda: tuple(default_libraries())
    )
    project_name: str = Field(default="p5-starter", min_length=1)
    archive_root_prefix: str = "package/"
    request_timeout: float = Field(default=30.0, gt=0.0)

    @field_validator("registry_url")
    @classmethod
    def _validate_registry_url(cls, value: str) -> str:
        cleaned = value.strip().rstrip("/")
        if not cleaned.startswith(("http://", "https://")):
            raise ValueError("registry_url must be an http(s) URL.")
        return cleaned

    @field_validator("packages")
    @classmethod
    def _validate_unique_packages(
        cls, value: tuple[PackageDescriptor, ...]
    ) -> tuple[PackageDescriptor, ...]:
        names = [package.full_name for package in value]
        if len(names) != len(set(names)):
            raise ValueError("packages must not list the same package twice.")
        return value


def _parse_package_list(raw: str) -> list[PackageDescriptor]:
    return [PackageDescriptor.parse(item) for item in raw.split(",") if item.strip()]


def load_settings(environ: Mapping[str, str] | None = None) -> BundlerSettings:
    """Build settings from ``STARTER_BUNDLER_*`` environment variables.

    Parameters
    ----------
    environ : Mapping[str, str] | None, default=None
        Environment to read. Defaults to ``os.environ``.

    Returns
    -------
    BundlerSettings
        Settings with defaults for every unset variable.

    Raises
    ------
    ConfigurationError
        If any variable holds an invalid value.
    """
    env = os.environ if environ is None else environ
    payload: dict[str, object] = {}
    try:
        if registry := env.get(f"{ENV_PREFIX}REGISTRY_URL"):
            payload["registry_url"] = registry
        if packages := env.get(f"{ENV_PREFIX}PACKAGES"):
            payload["packages"] = _parse_package_list(packages)
        if project := env.get(f"{ENV_PREFIX}PROJECT_NAME"):
            payload["project_name"] = project
        if timeout := env.get(f"{ENV_PREFIX}TIMEOUT"):
            payload["request_timeout"] = timeout
        return BundlerSettings(**payload)
    except (ValidationError, ValueError) as exc:
        raise ConfigurationError(f"Invalid bundler settings: {exc}") from exc
