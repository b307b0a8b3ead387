"""HTTP server for starter bundle downloads."""

from __future__ import annotations

import argparse
import logging
import os

import uvicorn
from fastapi import FastAPI, HTTPException, Query, status
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict

from starter_bundler import __version__
from starter_bundler.application.modes import PackagingMode
from starter_bundler.config import BundlerSettings, load_settings
from starter_bundler.errors import ArchiveAssemblyError
from starter_bundler.server.core import (
    ZIP_MEDIA_TYPE,
    BundleRequest,
    assemble_bundle,
    parse_minimal_flag,
    summarize_modules,
)

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health response payload."""

    model_config = ConfigDict(extra="forbid")

    status: str


class ReadyResponse(BaseModel):
    """Readiness response payload."""

    model_config = ConfigDict(extra="forbid")

    status: str


def create_app(settings: BundlerSettings | None = None) -> FastAPI:
    """Create starter bundle HTTP application."""
    app_settings = settings or load_settings()
    app = FastAPI(
        title="p5 Starter Bundler",
        version=__version__,
        description="Download a p5.js starter project assembled from npm packages.",
    )

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/readyz", response_model=ReadyResponse)
    async def readyz() -> ReadyResponse:
        return ReadyResponse(status="ready")

    @app.get("/api/package")
    async def download_package(
        minimal: str | None = Query(default=None),
    ) -> Response:
        """Assemble the starter project and return it as a zip attachment."""
        mode = PackagingMode.from_flag(parse_minimal_flag(minimal))
        try:
            outcome = await assemble_bundle(BundleRequest(mode=mode), app_settings)
        except ArchiveAssemblyError as exc:
            logger.error("bundle assembly failed: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(exc),
            ) from exc
        except Exception as exc:
            logger.exception("unexpected error during bundle assembly")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="internal server error",
            ) from exc

        headers = {
            "Content-Disposition": f'attachment; filename="{outcome.filename}"',
            "X-Archive-SHA256": outcome.sha256,
            "X-Bundle-Modules": summarize_modules(outcome.modules),
        }
        return Response(
            content=outcome.archive_bytes,
            media_type=ZIP_MEDIA_TYPE,
            headers=headers,
        )

    return app


def main() -> None:
    """Run starter bundle HTTP entrypoint."""
    parser = argparse.ArgumentParser(description="p5 starter bundle HTTP server.")
    parser.add_argument(
        "--host",
        default=os.getenv("STARTER_BUNDLER_HTTP_HOST", "0.0.0.0"),
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("STARTER_BUNDLER_HTTP_PORT", "8090")),
    )
    args = parser.parse_args()
    uvicorn.run(
        "starter_bundler.server.http_server:create_app",
        host=args.host,
        port=args.port,
        reload=False,
        factory=True,
    )


if __name__ == "__main__":
    main()
