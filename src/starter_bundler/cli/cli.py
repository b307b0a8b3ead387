#!/usr/bin/env python3
"""
starter_bundler.cli.cli

Typer-based CLI for assembling p5.js starter projects without the HTTP server.

Examples
--------
Build a full starter project in the current directory:

    starter-bundler build

Build a minimal project to a chosen path:

    starter-bundler build --minimal --output sketch.zip
"""

from __future__ import annotations

import asyncio
import logging
import traceback
from pathlib import Path

import typer

from starter_bundler.errors import BundlerError

app = typer.Typer(
    name="starter-bundler",
    help="Assemble p5.js starter projects from npm packages.",
    no_args_is_help=True,
)


def _print_bundler_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly bundler error.

    Parameters
    ----------
    exc : Exception
        Exception raised while bundling.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"✗ {type(exc).__name__}: {exc}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo(
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            err=True,
        )
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log bundling progress."),
) -> None:
    """Initialize shared CLI state."""
    if debug or verbose:
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("build")
def build_cmd(
    ctx: typer.Context,
    minimal: bool = typer.Option(
        False,
        "--minimal",
        help="Ship only the library bundles under lib/ instead of full packages.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Where to write the zip file. Defaults to a generated filename.",
    ),
) -> None:
    """Download the configured packages and write a starter project archive."""
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from starter_bundler.application.modes import PackagingMode
        from starter_bundler.config import load_settings
        from starter_bundler.server.core import BundleRequest, assemble_bundle

        settings = load_settings()
        request = BundleRequest(mode=PackagingMode.from_flag(minimal))
        outcome = asyncio.run(assemble_bundle(request, settings))
        target = output or Path(outcome.filename)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(outcome.archive_bytes)
    except BundlerError as exc:
        raise typer.Exit(code=_print_bundler_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_bundler_error(exc, debug))

    for module in outcome.modules:
        if module.ok:
            marker = "✓"
        elif module.failed:
            marker = "✗"
        else:
            marker = "?"
        typer.echo(f"{marker} {module.name}@{module.version} ({len(module.files)} files)")
    typer.echo(f"✓ Saved: {target} ({outcome.size_bytes} bytes, {outcome.mode.value})")


@app.command("packages")
def packages_cmd(ctx: typer.Context) -> None:
    """Print configured packages and recognized library bundles."""
    debug: bool = bool(ctx.obj.get("debug", False))
    from starter_bundler.config import load_settings

    try:
        settings = load_settings()
    except BundlerError as exc:
        raise typer.Exit(code=_print_bundler_error(exc, debug))

    typer.echo(f"registry: {settings.registry_url}")
    for package in settings.packages:
        typer.echo(f"package: {package.full_name}@{package.version}")
    for library in settings.libraries:
        state = "enabled" if library.enabled else "disabled"
        typer.echo(f"library: {library.filename} <- {library.module}/{library.path} ({state})")


if __name__ == "__main__":
    app()
