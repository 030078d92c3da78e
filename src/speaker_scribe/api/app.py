"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from speaker_scribe.api.config import APIConfig, DEFAULT_API_CONFIG
from speaker_scribe.api.health import router as health_router
from speaker_scribe.api.websocket import router as websocket_router
from speaker_scribe.config import ScribeConfig
from speaker_scribe.pipeline import Orchestrator
from speaker_scribe.utils import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Mark the app started; models are only loaded on a ``load`` request."""
    logger.info("Starting speaker-scribe API...")
    app.state.initialized = True

    yield

    logger.info("speaker-scribe API stopped")


def create_app(
    config: APIConfig | None = None,
    scribe_config: ScribeConfig | None = None,
    orchestrator: Orchestrator | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or DEFAULT_API_CONFIG
    scribe_config = scribe_config or (orchestrator.config if orchestrator else ScribeConfig())
    setup_logging(level=scribe_config.log_level, format_style=scribe_config.log_format)

    app = FastAPI(
        title="speaker-scribe",
        description="Local transcription with speaker-attributed words",
        version="0.1.0",
        docs_url="/docs" if config.enable_docs else None,
        redoc_url="/redoc" if config.enable_docs else None,
        openapi_url="/openapi.json" if config.enable_docs else None,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.initialized = False
    app.state.orchestrator = orchestrator or Orchestrator(config=scribe_config)

    if config.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(health_router, prefix="/health", tags=["health"])
    app.include_router(websocket_router)

    return app
