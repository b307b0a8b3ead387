"""Unit tests for zip archive assembly."""

from __future__ import annotations

import io
import zipfile

import pytest

from starter_bundler.archive.zip_assembler import ZipAssembler
from starter_bundler.errors import ArchiveAssemblyError

FIXED_TIME = (2024, 1, 2, 3, 4, 6)


def _read(archive: bytes) -> dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


def test_finalize_serializes_text_and_binary_entries() -> None:
    """Text is stored as UTF-8 and bytes are stored verbatim."""
    assembler = ZipAssembler(timestamp=FIXED_TIME)
    assembler.add("index.html", "<!DOCTYPE html>")
    assembler.add("lib/p5.min.js", b"\x00\xffbinary")

    contents = _read(assembler.finalize())

    assert contents == {
        "index.html": b"<!DOCTYPE html>",
        "lib/p5.min.js": b"\x00\xffbinary",
    }


def test_last_write_wins_for_duplicate_paths() -> None:
    assembler = ZipAssembler(timestamp=FIXED_TIME)
    assembler.add("lib/p5.min.js", "first")
    assembler.add("lib/p5.min.js", "second")

    assert len(assembler) == 1
    assert _read(assembler.finalize()) == {"lib/p5.min.js": b"second"}


def test_same_entries_serialize_identically() -> None:
    """Insertion order does not change the output for a fixed timestamp."""
    first = ZipAssembler(timestamp=FIXED_TIME)
    first.add("b.txt", "b")
    first.add("a.txt", "a")
    second = ZipAssembler(timestamp=FIXED_TIME)
    second.add("a.txt", "a")
    second.add("b.txt", "b")

    assert first.finalize() == second.finalize()


def test_names_and_membership() -> None:
    assembler = ZipAssembler()
    assembler.add("/modules/p5/package.json", "{}")

    assert "modules/p5/package.json" in assembler
    assert assembler.names() == ["modules/p5/package.json"]


def test_add_after_finalize_is_rejected() -> None:
    """Once serialized, the archive cannot change."""
    assembler = ZipAssembler()
    assembler.add("index.js", "")
    archive = assembler.finalize()

    with pytest.raises(ArchiveAssemblyError, match="already finalized"):
        assembler.add("late.js", "")
    assert assembler.finalize() == archive


@pytest.mark.parametrize("path", ["", "/", "lib/"])
def test_invalid_entry_paths_are_rejected(path: str) -> None:
    with pytest.raises(ArchiveAssemblyError, match="invalid archive entry path"):
        ZipAssembler().add(path, "x")


def test_serialization_failure_raises_assembly_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Serialization errors surface as ArchiveAssemblyError, not partial bytes."""

    def broken_writestr(self: zipfile.ZipFile, *args: object, **kwargs: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(zipfile.ZipFile, "writestr", broken_writestr)
    assembler = ZipAssembler()
    assembler.add("index.js", "")

    with pytest.raises(ArchiveAssemblyError, match="disk full"):
        assembler.finalize()
