"""API server configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class APIConfig(BaseModel):
    """Server settings for the host application."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)

    enable_docs: bool = True
    enable_cors: bool = True
    cors_origins: list[str] = ["*"]

    # Per-connection cap on requests being handled at once
    max_pending_requests: int = Field(default=8, ge=1)


DEFAULT_API_CONFIG = APIConfig()
