"""Message schemas for the host channel."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Requests
# ============================================================================

class ClientMessage(BaseModel):
    """Envelope of every request: ``{"type": ..., "data": {...}}``."""

    type: Literal["load", "run", "align"]
    data: dict[str, Any] = Field(default_factory=dict)


class LoadRequest(BaseModel):
    """Prepare models on a device."""

    device: str | None = Field(
        default=None, description="Device profile key ('cuda' or 'cpu'); defaults to the configured device"
    )


class RunRequest(BaseModel):
    """Transcribe and segment one buffer."""

    audio: list[float] = Field(min_length=1, description="Mono float samples at 16 kHz")
    language: str | None = Field(default="en", description="ISO language hint")


class WordPayload(BaseModel):
    text: str
    timestamp: tuple[float, float]

    @field_validator("timestamp")
    @classmethod
    def check_order(cls, value: tuple[float, float]) -> tuple[float, float]:
        if value[0] > value[1]:
            raise ValueError("timestamp start must not exceed end")
        return value


class SegmentPayload(BaseModel):
    id: int
    label: str
    start: float
    end: float
    confidence: float = 0.0


class AlignRequest(BaseModel):
    """Group a previous run's words by speaker."""

    transcript: list[WordPayload]
    segments: list[SegmentPayload]


# ============================================================================
# Responses
# ============================================================================

class LoadingMessage(BaseModel):
    status: Literal["loading"] = "loading"
    data: str


class LoadedMessage(BaseModel):
    status: Literal["loaded"] = "loaded"


class RunResult(BaseModel):
    transcript: list[dict[str, Any]]
    segments: list[dict[str, Any]]


class CompleteMessage(BaseModel):
    status: Literal["complete"] = "complete"
    result: RunResult
    time: float = Field(description="Wall-clock milliseconds for both stages")


class AlignResult(BaseModel):
    groups: list[dict[str, Any]]
    speakers: list[str]


class AlignedMessage(BaseModel):
    status: Literal["aligned"] = "aligned"
    result: AlignResult


class ErrorMessage(BaseModel):
    """Failure answer; every request that fails gets exactly one."""

    status: Literal["error"] = "error"
    message: str
    code: str
    request: str | None = Field(default=None, description="Request type that failed")
