"""Request dispatcher between a host channel and the orchestrator."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import numpy as np
from pydantic import ValidationError

from speaker_scribe.alignment import align_words_to_segments, speaker_labels
from speaker_scribe.api.schemas import (
    AlignedMessage,
    AlignRequest,
    AlignResult,
    ClientMessage,
    CompleteMessage,
    ErrorMessage,
    LoadedMessage,
    LoadingMessage,
    LoadRequest,
    RunRequest,
    RunResult,
)
from speaker_scribe.core import (
    InferenceError,
    InvalidAudioError,
    ModelLoadError,
    NotReadyError,
    ScribeError,
    SpeakerSegment,
    UnsupportedDeviceError,
    Word,
)
from speaker_scribe.devices import resolve_device
from speaker_scribe.models import ProgressChannel
from speaker_scribe.pipeline import Orchestrator
from speaker_scribe.utils import get_logger

logger = get_logger(__name__)

Send = Callable[[dict[str, Any]], Awaitable[None]]

ERROR_CODES: dict[type[ScribeError], str] = {
    UnsupportedDeviceError: "UNSUPPORTED_DEVICE",
    ModelLoadError: "MODEL_LOAD_FAILED",
    InferenceError: "INFERENCE_FAILED",
    NotReadyError: "NOT_READY",
    InvalidAudioError: "INVALID_REQUEST",
}


def error_code(exc: BaseException) -> str:
    for cls in type(exc).__mro__:
        if cls in ERROR_CODES:
            return ERROR_CODES[cls]
    return "INTERNAL_ERROR"


class PipelineWorker:
    """Answers ``load``/``run``/``align`` requests through ``send``.

    Every request ends with either its terminal response or one error
    message; nothing is left unanswered.
    """

    def __init__(self, orchestrator: Orchestrator, send: Send):
        self.orchestrator = orchestrator
        self.send = send

    async def handle(self, message: Any) -> None:
        try:
            request = ClientMessage.model_validate(message)
        except ValidationError as e:
            await self._send_error(f"Invalid message: {e.errors()[0]['msg']}", "INVALID_REQUEST")
            return

        handlers = {
            "load": self._load,
            "run": self._run,
            "align": self._align,
        }
        try:
            await handlers[request.type](request.data)
        except ValidationError as e:
            await self._send_error(f"Invalid {request.type} payload: {e}", "INVALID_REQUEST", request.type)
        except ScribeError as e:
            logger.warning(f"{request.type} failed: {e}")
            await self._send_error(str(e), error_code(e), request.type)
        except Exception as e:
            logger.exception(f"Unexpected error handling {request.type}")
            await self._send_error(str(e) or type(e).__name__, "INTERNAL_ERROR", request.type)

    async def _load(self, data: dict[str, Any]) -> None:
        payload = LoadRequest.model_validate(data)
        device = payload.device or self.orchestrator.config.pipeline.default_device
        resolve_device(device)

        await self.send(LoadingMessage(data=f"Loading models ({device})...").model_dump())

        channel = ProgressChannel()
        prepare = asyncio.create_task(self.orchestrator.prepare_models(device, channel))
        try:
            async for event in channel:
                await self.send(event)
        except Exception:
            # prepare is awaited on every path
            await asyncio.gather(prepare, return_exceptions=True)
            raise
        await prepare

        await self.send(LoadedMessage().model_dump())

    async def _run(self, data: dict[str, Any]) -> None:
        payload = RunRequest.model_validate(data)
        audio = np.asarray(payload.audio, dtype=np.float32)

        result = await self.orchestrator.transcribe(audio, payload.language)
        await self.send(
            CompleteMessage(result=RunResult(**result.to_dict()), time=result.elapsed_ms).model_dump()
        )

    async def _align(self, data: dict[str, Any]) -> None:
        payload = AlignRequest.model_validate(data)
        words = [Word(text=w.text, timestamp=w.timestamp) for w in payload.transcript]
        segments = [SpeakerSegment(**s.model_dump()) for s in payload.segments]

        groups = align_words_to_segments(
            words, segments, self.orchestrator.config.segmentation.no_speaker_label
        )
        await self.send(
            AlignedMessage(
                result=AlignResult(
                    groups=[g.to_dict() for g in groups],
                    speakers=speaker_labels(groups),
                )
            ).model_dump()
        )

    async def _send_error(self, message: str, code: str, request: str | None = None) -> None:
        await self.send(ErrorMessage(message=message, code=code, request=request).model_dump())
