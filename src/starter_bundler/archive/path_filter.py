"""Decide which package archive members are kept, and under which path."""

from __future__ import annotations

from pathlib import PurePosixPath

DEFAULT_ROOT_PREFIX = "package/"
NESTED_DEPENDENCY_DIR = "node_modules"


def normalize_member_path(
    raw_path: str, root_prefix: str = DEFAULT_ROOT_PREFIX
) -> str | None:
    """Return the kept path for an archive member, or ``None`` to reject it.

    Parameters
    ----------
    raw_path : str
        Member path exactly as stored in the tar archive.
    root_prefix : str, default="package/"
        Top-level directory every published package is wrapped in.

    Returns
    -------
    str | None
        Path relative to the package root, or ``None`` for hidden files,
        nested dependency trees and paths that would escape the package root.
    """
    path = raw_path.removeprefix(root_prefix) if root_prefix else raw_path
    if not path or path.startswith((".", "/")):
        return None
    parts = PurePosixPath(path).parts
    if NESTED_DEPENDENCY_DIR in parts or ".." in parts:
        return None
    return path
