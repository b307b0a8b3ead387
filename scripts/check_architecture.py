#!/usr/bin/env python3
"""Architecture boundary checks."""

from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/starter_bundler"


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _assert_no_imports(path: Path, banned: list[str]) -> None:
    text = _read(path)
    for token in banned:
        if token in text:
            raise SystemExit(f"Architecture violation in {path}: found '{token}'")


def main() -> None:
    """Run repository architecture boundary checks."""
    transport_imports = [
        "import fastapi",
        "from fastapi",
        "import uvicorn",
        "import typer",
        "from typer",
    ]

    for layer in ("application", "archive"):
        for path in (PACKAGE / layer).glob("*.py"):
            _assert_no_imports(path, [*transport_imports, "import httpx"])

    for path in (PACKAGE / "adapters").glob("*.py"):
        _assert_no_imports(path, transport_imports)

    _assert_no_imports(
        PACKAGE / "cli/cli.py",
        ["import fastapi", "from fastapi", "import httpx"],
    )

    print("Architecture checks passed.")


if __name__ == "__main__":
    main()
