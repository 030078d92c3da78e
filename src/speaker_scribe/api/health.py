"""Health check endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthStatus(BaseModel):
    """Health check response."""
    status: str
    checks: dict[str, bool] | None = None


@router.get("/live", response_model=HealthStatus)
async def liveness() -> HealthStatus:
    """Liveness probe: the process is up."""
    return HealthStatus(status="alive")


@router.get("/ready")
async def readiness(request: Request) -> JSONResponse:
    """Readiness probe: all three model handles are loaded.

    Returns 503 until a ``load`` request has succeeded.
    """
    orchestrator = getattr(request.app.state, "orchestrator", None)
    registry = orchestrator.registry if orchestrator is not None else None

    checks = {
        "models": bool(registry and registry.is_ready),
    }
    all_healthy = all(checks.values())

    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={
            "status": "ready" if all_healthy else "not_ready",
            "checks": checks,
            "loaded": registry.loaded_handles if registry else [],
            "device": registry.device if registry else None,
        },
    )


@router.get("/startup", response_model=HealthStatus)
async def startup(request: Request) -> JSONResponse:
    """Startup probe: application lifespan has run."""
    initialized = getattr(request.app.state, "initialized", False)

    return JSONResponse(
        status_code=200 if initialized else 503,
        content={"status": "started" if initialized else "starting"},
    )
