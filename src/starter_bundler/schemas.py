"""Pydantic schemas for packages and library bundles."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PackageDescriptor(BaseModel):
    """Identify a single upstream npm package."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    scope: str | None = None
    name: str
    version: str = "latest"

    @field_validator("name", "version")
    @classmethod
    def _validate_not_blank(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("package name and version cannot be empty.")
        if "/" in cleaned:
            raise ValueError("package name and version cannot contain '/'.")
        return cleaned

    @field_validator("scope")
    @classmethod
    def _normalize_scope(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip().removeprefix("@")
        if not cleaned or "/" in cleaned:
            raise ValueError("package scope must be a single non-empty segment.")
        return cleaned

    @property
    def full_name(self) -> str:
        """Registry name, including the ``@scope/`` part for scoped packages."""
        if self.scope:
            return f"@{self.scope}/{self.name}"
        return self.name

    @classmethod
    def parse(cls, spec: str) -> PackageDescriptor:
        """Build a descriptor from ``name``, ``@scope/name`` or ``name@version``.

        Parameters
        ----------
        spec : str
            Package specifier as written in configuration.

        Returns
        -------
        PackageDescriptor
            Parsed descriptor; version defaults to ``latest``.
        """
        raw = spec.strip()
        version = "latest"
        # A leading "@" belongs to the scope, so only look past it for a version.
        at = raw.find("@", 1)
        if at != -1:
            raw, version = raw[:at], raw[at + 1 :]
        scope: str | None = None
        name = raw
        if raw.startswith("@"):
            scope_part, sep, name = raw.partition("/")
            if not sep:
                raise ValueError(f"scoped package '{spec}' is missing a name.")
            scope = scope_part
        return cls(scope=scope, name=name, version=version)


class LibraryBundle(BaseModel):
    """A prebuilt script shipped inside one of the bundled packages."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str = Field(min_length=1)
    module: str = Field(min_length=1)
    path: str = Field(min_length=1)
    enabled: bool = True

    @field_validator("filename")
    @classmethod
    def _validate_filename(cls, value: str) -> str:
        if "/" in value:
            raise ValueError("library filename must not contain '/'.")
        return value

    @field_validator("path")
    @classmethod
    def _validate_path(cls, value: str) -> str:
        cleaned = value.strip().lstrip("/")
        if not cleaned:
            raise ValueError("library path cannot be empty.")
        return cleaned
