"""Tar decoding, member path filtering and zip assembly."""

from __future__ import annotations

from starter_bundler.archive.path_filter import (
    NESTED_DEPENDENCY_DIR,
    normalize_member_path,
)
from starter_bundler.archive.tar_decoder import TarEntry, iter_tar_entries
from starter_bundler.archive.zip_assembler import ZipAssembler

__all__ = [
    "NESTED_DEPENDENCY_DIR",
    "TarEntry",
    "ZipAssembler",
    "iter_tar_entries",
    "normalize_member_path",
]
