"""Domain exceptions raised by the bundler."""

from __future__ import annotations


class BundlerError(Exception):
    """Base class for all bundler failures."""

    exit_code = 1


class ConfigurationError(BundlerError):
    """Settings could not be loaded or validated."""

    exit_code = 2


class ResolutionFailure(BundlerError):
    """Registry lookup failed or returned no tarball URL."""


class FetchFailure(BundlerError):
    """Package archive download failed."""


class ArchiveFormatError(BundlerError):
    """Tar input is malformed or truncated."""


class ManifestError(BundlerError):
    """Package manifest is present but cannot be parsed."""


class ArchiveAssemblyError(BundlerError):
    """Output zip archive could not be serialized."""

    exit_code = 3
