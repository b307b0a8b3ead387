"""Decode tar (optionally gzip-compressed) archives into file entries."""

from __future__ import annotations

import io
import logging
import tarfile
import zlib
from collections.abc import Iterator
from dataclasses import dataclass

from starter_bundler.errors import ArchiveFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TarEntry:
    """One regular-file member of a tar archive."""

    path: str
    content: bytes


def _ensure_clean_end(archive: tarfile.TarFile) -> None:
    """Fail unless only zero padding follows the last member.

    ``tarfile`` stops iterating at a bad or short header that follows a
    valid member instead of raising, so the remainder is checked here.
    """
    archive.fileobj.seek(archive.offset)
    rest = archive.fileobj.read()
    if rest.strip(b"\0"):
        raise ArchiveFormatError(
            f"malformed tar header at offset {archive.offset} "
            f"({len(rest)} trailing bytes)"
        )


def iter_tar_entries(data: bytes) -> Iterator[TarEntry]:
    """Yield every regular file of a tar archive in archive order.

    Compression (gzip, bz2, xz) is detected transparently. Each member is read
    in full before it is yielded, so callers never see partial content.

    Parameters
    ----------
    data : bytes
        Complete archive payload.

    Yields
    ------
    TarEntry
        Member path and raw content bytes.

    Raises
    ------
    ArchiveFormatError
        If a header block is malformed or the archive is truncated.
    """
    if not data:
        raise ArchiveFormatError("archive payload is empty")
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:*") as archive:
            for member in archive:
                if not member.isfile():
                    logger.debug("skipping non-file tar member %s", member.name)
                    continue
                handle = archive.extractfile(member)
                if handle is None:
                    continue
                with handle:
                    content = handle.read()
                if len(content) != member.size:
                    raise ArchiveFormatError(
                        f"tar member '{member.name}' is truncated "
                        f"({len(content)} of {member.size} bytes)"
                    )
                yield TarEntry(path=member.name, content=content)
            _ensure_clean_end(archive)
    except (tarfile.TarError, EOFError, zlib.error, OSError) as exc:
        raise ArchiveFormatError(f"malformed tar archive: {exc}") from exc
