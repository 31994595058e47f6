"""FastAPI application configuration (Distributor API)."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CollectorRegistry, make_asgi_app, multiprocess

from .dependencies import (
    get_database_client_dependency,
    get_distributor_repository,
    get_settings_dependency,
)
from .routers import claims, distributors, tokens

settings = get_settings_dependency()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await get_distributor_repository().initialize()
    yield
    await get_database_client_dependency().close()


def _metrics_app():
    if os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return make_asgi_app(registry=registry)
    return make_asgi_app()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="MerkleDrop Distributor API",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Include routers
    app.include_router(distributors.router, prefix="/api/v1")
    app.include_router(claims.router, prefix="/api/v1")
    app.include_router(tokens.router, prefix="/api/v1")

    app.mount("/metrics", _metrics_app())

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": f"Welcome to {settings.app_name} Distributor API",
            "version": settings.app_version,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint; reports degraded while Redis is unreachable."""
        database_ok = await get_database_client_dependency().ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "database": "ok" if database_ok else "unavailable",
            "service": f"{settings.app_name} Distributor",
            "version": settings.app_version,
        }

    return app


app = create_app()
