#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
SurfaceMark — FastAPI application factory
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from surfacemark.core.config import get_settings
from surfacemark.core.errors import DepthExceeded, InvalidSurface
from surfacemark.routes import render
from surfacemark.schemas import HealthResponse
from surfacemark.services.profiles import Surface, get_registry

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    # Build the profile registry up front so the first request doesn't pay for it
    get_registry()
    yield


# -----------------------------------------------------------------------------

def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Renders usertext and wiki Markdown to sanitized HTML.",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # ── CORS ──────────────────────────────────────────────────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── API routers ───────────────────────────────────────────────────────

    prefix = "/api/v1"

    app.include_router(render.router, prefix=prefix)

    # ── Global exception handlers ─────────────────────────────────────────

    @app.exception_handler(InvalidSurface)
    async def invalid_surface(request: Request, exc: InvalidSurface):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc)},
        )

    @app.exception_handler(DepthExceeded)
    async def depth_exceeded(request: Request, exc: DepthExceeded):
        return JSONResponse(
            status_code=422,
            content={"detail": "Document nests too deeply to render"},
        )

    @app.exception_handler(500)
    async def server_error(request: Request, exc):
        log.exception("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    # ── Health check ──────────────────────────────────────────────────────

    @app.get("/api/health", tags=["system"], response_model=HealthResponse)
    async def health():
        return HealthResponse(
            version=settings.app_version,
            app=settings.app_name,
            surfaces={s.name.lower(): int(s) for s in Surface},
        )

    return app


# -----------------------------------------------------------------------------

app = create_app()


# -----------------------------------------------------------------------------
