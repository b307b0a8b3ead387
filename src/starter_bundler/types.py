"""Shared type aliases for bundler modules."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeAlias

FileCollection: TypeAlias = dict[str, bytes]
FileView: TypeAlias = Mapping[str, bytes]
EntryContent: TypeAlias = str | bytes
