"""Inference orchestrator: model preparation and parallel transcription."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, TypeVar

import numpy as np

from speaker_scribe.config import ScribeConfig
from speaker_scribe.core import (
    BaseSegmentationModel,
    BaseSegmentationProcessor,
    BaseTranscriber,
    InferenceError,
    InvalidAudioError,
    ModelLoadError,
    ModelSet,
    SpeakerSegment,
    TranscriptionResult,
    Word,
)
from speaker_scribe.devices import resolve_device
from speaker_scribe.models import ModelRegistry, ProgressChannel, get_model_registry
from speaker_scribe.utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Orchestrator:
    """Entry point tying the model registry to the two inference stages.

    Usage:
        orchestrator = Orchestrator()
        await orchestrator.prepare_models("cuda")
        result = await orchestrator.transcribe(audio, "en")
        groups = align_words_to_segments(result.words, result.segments)
    """

    def __init__(
        self,
        registry: ModelRegistry | None = None,
        config: ScribeConfig | None = None,
    ):
        self.config = config or (registry.config if registry is not None else ScribeConfig())
        self.registry = registry or get_model_registry(self.config)

    @property
    def is_ready(self) -> bool:
        return self.registry.is_ready

    async def prepare_models(
        self, device: str, progress: ProgressChannel | None = None
    ) -> ModelSet:
        """Acquire all models and warm up the transcriber on the primary device.

        ``progress`` is closed when preparation ends, whether it succeeded or not.

        Raises:
            UnsupportedDeviceError: Before any loading, for an unknown device
            ModelLoadError: If a load or the warm-up fails
        """
        try:
            profile = resolve_device(device)
            models = await self.registry.acquire(progress, device)

            if profile.is_primary:
                if progress is not None:
                    progress.publish({
                        "status": "loading",
                        "data": "Compiling kernels and warming up model...",
                    })
                await self._warm_up(models.transcriber)

            return models
        finally:
            if progress is not None:
                progress.close()

    async def _warm_up(self, transcriber: BaseTranscriber) -> None:
        settings = self.config.pipeline
        silence = np.zeros(int(settings.sample_rate * settings.warmup_seconds), dtype=np.float32)

        logger.info(f"Warming up transcriber on {settings.warmup_seconds:.1f}s of silence")
        start = time.perf_counter()
        try:
            await asyncio.to_thread(transcriber.transcribe, silence, settings.warmup_language)
        except Exception as e:
            raise ModelLoadError("transcriber", f"warm-up failed: {e}") from e
        logger.info(f"Warm-up finished in {time.perf_counter() - start:.2f}s")

    async def transcribe(self, audio: Any, language: str | None) -> TranscriptionResult:
        """Run transcription and segmentation concurrently on one buffer.

        Args:
            audio: Mono float samples at the pipeline sample rate
            language: ISO language hint for the transcriber

        Returns:
            Words, labelled segments and elapsed wall-clock milliseconds

        Raises:
            NotReadyError: If models have not been acquired
            InvalidAudioError: If the buffer is empty or not one-dimensional
            InferenceError: If either stage fails; ``stage`` names which one
        """
        models = self.registry.get()
        audio = _as_audio_buffer(audio)

        start = time.perf_counter()
        words_task = asyncio.create_task(
            self._run_stage("transcription", self._transcribe_words, models.transcriber, audio, language)
        )
        segments_task = asyncio.create_task(
            self._run_stage(
                "segmentation",
                self._segment,
                models.segmentation_processor,
                models.segmentation_model,
                audio,
            )
        )
        results = await asyncio.gather(words_task, segments_task, return_exceptions=True)
        elapsed_ms = (time.perf_counter() - start) * 1000

        for result in results:
            if isinstance(result, BaseException):
                raise result
        words, segments = results

        logger.info(
            f"Transcribed {len(audio) / self.config.pipeline.sample_rate:.1f}s of audio: "
            f"{len(words)} words, {len(segments)} segments in {elapsed_ms:.0f}ms"
        )
        return TranscriptionResult(words=words, segments=segments, elapsed_ms=elapsed_ms)

    async def _run_stage(self, stage: str, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except Exception as e:
            logger.error(f"{stage} failed: {e}")
            raise InferenceError(stage, str(e)) from e

    def _transcribe_words(
        self, transcriber: BaseTranscriber, audio: np.ndarray, language: str | None
    ) -> list[Word]:
        return transcriber.transcribe(
            audio,
            language=language,
            chunk_length_s=self.config.transcription.chunk_length_s,
        )

    def _segment(
        self,
        processor: BaseSegmentationProcessor,
        model: BaseSegmentationModel,
        audio: np.ndarray,
    ) -> list[SpeakerSegment]:
        inputs = processor(audio)
        logits = model(inputs)
        spans = processor.post_process_speaker_diarization(logits, len(audio))[0]

        id2label = model.id2label
        return [
            SpeakerSegment(
                id=span["id"],
                label=id2label[span["id"]],
                start=span["start"],
                end=span["end"],
                confidence=span["confidence"],
            )
            for span in spans
        ]


def _as_audio_buffer(audio: Any) -> np.ndarray:
    try:
        buffer = np.asarray(audio, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise InvalidAudioError(f"Audio must be numeric samples: {e}") from e

    if buffer.ndim != 1:
        raise InvalidAudioError(f"Audio must be mono (1-D), got shape {buffer.shape}")
    if buffer.size == 0:
        raise InvalidAudioError("Audio buffer is empty")
    return buffer
