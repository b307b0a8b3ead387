"""Accumulate named entries and serialize them into one zip archive."""

from __future__ import annotations

import io
import time
import zipfile
from typing import TypeAlias

from starter_bundler.errors import ArchiveAssemblyError
from starter_bundler.types import EntryContent

ZipTimestamp: TypeAlias = tuple[int, int, int, int, int, int]


class ZipAssembler:
    """In-memory zip builder with last-write-wins entries.

    Entries are kept in a mapping until :meth:`finalize`, which serializes the
    whole archive at once. Nothing is written before then, so a failure never
    leaves a partially written archive behind.
    """

    def __init__(
        self,
        *,
        compression: int = zipfile.ZIP_DEFLATED,
        timestamp: ZipTimestamp | None = None,
    ) -> None:
        self._entries: dict[str, bytes] = {}
        self._compression = compression
        self._timestamp = timestamp or time.localtime()[:6]
        self._archive: bytes | None = None

    def add(self, path: str, content: EntryContent) -> None:
        """Store ``content`` at ``path``, replacing any earlier entry."""
        if self._archive is not None:
            raise ArchiveAssemblyError(
                f"cannot add '{path}': archive is already finalized"
            )
        name = path.lstrip("/")
        if not name or name.endswith("/"):
            raise ArchiveAssemblyError(f"invalid archive entry path: '{path}'")
        payload = content.encode("utf-8") if isinstance(content, str) else content
        self._entries[name] = bytes(payload)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> list[str]:
        """Return the stored entry paths, sorted."""
        return sorted(self._entries)

    def finalize(self) -> bytes:
        """Serialize all entries and return the zip payload.

        Raises
        ------
        ArchiveAssemblyError
            If serialization fails; no partial archive is returned.
        """
        if self._archive is not None:
            return self._archive
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, mode="w", compression=self._compression) as zf:
                for name in sorted(self._entries):
                    info = zipfile.ZipInfo(name, date_time=self._timestamp)
                    info.compress_type = self._compression
                    info.external_attr = 0o644 << 16
                    zf.writestr(info, self._entries[name])
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, OSError) as exc:
            raise ArchiveAssemblyError(f"failed to serialize zip archive: {exc}") from exc
        self._archive = buffer.getvalue()
        return self._archive
