"""FastAPI application entry point."""

from __future__ import annotations

import threading

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, reports, shift
from .config import settings
from .persistence.filesystem import ShiftArchive
from .services.shift.classification import RandomClassifier
from .services.shift.scanner import RandomCodeSource, Scanner


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        root_path="",
    )
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # single courier session; replaced wholesale by every accepted action
    app.state.shift_session = None
    app.state.shift_lock = threading.Lock()
    app.state.classifier = RandomClassifier()
    app.state.scanner = Scanner(RandomCodeSource())
    app.state.archive = ShiftArchive() if settings.archive_shifts else None

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
    app.include_router(shift.router, prefix=settings.api_prefix)
    app.include_router(reports.router, prefix=settings.api_prefix)
    return app


app = create_app()
