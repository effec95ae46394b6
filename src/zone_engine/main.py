"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import get_services
from .api.routes import boundaries, compatibility, fares, health
from .config import settings
from .logging_config import configure_logging
from .services.seed import seed_boundaries

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_legacy_boundaries:
        created = await seed_boundaries(get_services().store)
        logger.info(f"Startup seed created {created} boundaries")
    yield


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(boundaries.router, prefix=settings.api_prefix)
    app.include_router(fares.router, prefix=settings.api_prefix)
    app.include_router(compatibility.router, prefix=settings.api_prefix)
    return app


app = create_app()
