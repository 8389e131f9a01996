"""FastAPI application with lifespan management."""

from __future__ import annotations

import importlib.metadata
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from mediscript.api.middleware.error_handler import register_error_handlers
from mediscript.api.routes import evaluate, health
from mediscript.core.config import APIConfig, AppSettings
from mediscript.core.startup_checks import validate_settings
from mediscript.factory import create_orchestrator
from mediscript.hooks import setup_logging


def _get_version() -> str:
    """Read package version from installed metadata, with dev fallback."""
    try:
        return importlib.metadata.version("mediscript")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Resolve settings once, fail fast on missing credentials, wire the engine."""
    settings = AppSettings()
    validate_settings(settings)
    setup_logging(settings.observability)

    app.state.settings = settings
    app.state.orchestrator = create_orchestrator(settings)
    yield


def create_app() -> FastAPI:
    api_config = APIConfig()
    app = FastAPI(
        title=api_config.title,
        description=api_config.description,
        version=_get_version(),
        lifespan=lifespan,
    )
    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(evaluate.router, prefix="/api")
    return app


app = create_app()
