"""Adapters connecting the bundler to external services."""

from __future__ import annotations

from starter_bundler.adapters.npm_registry import NpmRegistrySource

__all__ = ["NpmRegistrySource"]
