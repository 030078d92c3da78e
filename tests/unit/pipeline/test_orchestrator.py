"""Tests for model preparation and parallel transcription."""

import numpy as np
import pytest

from speaker_scribe.core import (
    InferenceError,
    InvalidAudioError,
    ModelLoadError,
    NotReadyError,
    UnsupportedDeviceError,
)
from speaker_scribe.models import ProgressChannel

AUDIO = np.zeros(16000 * 3, dtype=np.float32)


async def drain(channel):
    return [event async for event in channel]


class TestPrepareModels:
    @pytest.mark.asyncio
    async def test_fallback_device_skips_warm_up(self, orchestrator, fake_models):
        await orchestrator.prepare_models("cpu")

        assert orchestrator.is_ready
        assert fake_models.transcriber.calls == []

    @pytest.mark.asyncio
    async def test_primary_device_warms_up_once(self, orchestrator, fake_models):
        await orchestrator.prepare_models("cuda")

        assert fake_models.transcriber.calls == [
            {"samples": 16000, "language": "en", "chunk_length_s": 30},
        ]

    @pytest.mark.asyncio
    async def test_progress_forwarded_then_closed(self, orchestrator):
        channel = ProgressChannel()

        await orchestrator.prepare_models("cuda", channel)
        events = await drain(channel)

        assert channel.closed
        assert events[-1]["status"] == "loading"
        assert {e["name"] for e in events[:-1]} == {
            "transcriber", "segmentation_processor", "segmentation_model",
        }

    @pytest.mark.asyncio
    async def test_warm_up_failure_is_fatal(self, orchestrator, fake_models):
        fake_models.transcriber.error = RuntimeError("kernel compile failed")
        channel = ProgressChannel()

        with pytest.raises(ModelLoadError, match="warm-up"):
            await orchestrator.prepare_models("cuda", channel)

        assert channel.closed

    @pytest.mark.asyncio
    async def test_unsupported_device(self, orchestrator, fake_models):
        channel = ProgressChannel()

        with pytest.raises(UnsupportedDeviceError):
            await orchestrator.prepare_models("webgpu", channel)

        assert not fake_models.counts
        assert channel.closed
        assert await drain(channel) == []

    @pytest.mark.asyncio
    async def test_unsupported_device_rejected_even_when_cached(self, orchestrator):
        await orchestrator.prepare_models("cpu")

        with pytest.raises(UnsupportedDeviceError):
            await orchestrator.prepare_models("webgpu")

    @pytest.mark.asyncio
    async def test_load_failure_propagates(self, orchestrator, fake_models):
        fake_models.failures["segmentation_model"] = RuntimeError("boom")

        with pytest.raises(ModelLoadError):
            await orchestrator.prepare_models("cpu")

        assert not orchestrator.is_ready


class TestTranscribe:
    @pytest.mark.asyncio
    async def test_not_ready(self, orchestrator):
        with pytest.raises(NotReadyError):
            await orchestrator.transcribe(AUDIO, "en")

    @pytest.mark.asyncio
    async def test_returns_words_and_labelled_segments(self, orchestrator, fake_models):
        await orchestrator.prepare_models("cpu")

        result = await orchestrator.transcribe(AUDIO, "fr")

        assert [w.text for w in result.words] == [" hi", " there", " bye"]
        assert [s.label for s in result.segments] == ["SPEAKER_00", "NO_SPEAKER", "SPEAKER_01"]
        assert [s.id for s in result.segments] == [1, 0, 2]
        assert result.segments[0].confidence == 0.9
        assert result.elapsed_ms >= 0

        assert fake_models.transcriber.calls[-1] == {
            "samples": len(AUDIO), "language": "fr", "chunk_length_s": 30,
        }
        assert fake_models.segmentation_processor.num_samples == [len(AUDIO)]

    @pytest.mark.asyncio
    async def test_accepts_plain_list(self, orchestrator):
        await orchestrator.prepare_models("cpu")

        result = await orchestrator.transcribe([0.0] * 1600, "en")

        assert len(result.words) == 3

    @pytest.mark.asyncio
    async def test_stages_run_in_parallel(self, orchestrator, fake_models):
        await orchestrator.prepare_models("cpu")
        fake_models.transcriber.delay = 0.4
        fake_models.segmentation_model.delay = 0.4

        result = await orchestrator.transcribe(AUDIO, "en")

        assert 400 <= result.elapsed_ms < 700

    @pytest.mark.asyncio
    async def test_transcription_failure_tagged(self, orchestrator, fake_models):
        await orchestrator.prepare_models("cpu")
        fake_models.transcriber.error = RuntimeError("decoder exploded")

        with pytest.raises(InferenceError) as exc_info:
            await orchestrator.transcribe(AUDIO, "en")

        assert exc_info.value.stage == "transcription"
        assert "decoder exploded" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_segmentation_failure_tagged(self, orchestrator, fake_models):
        await orchestrator.prepare_models("cpu")
        fake_models.segmentation_model.error = RuntimeError("bad shape")

        with pytest.raises(InferenceError) as exc_info:
            await orchestrator.transcribe(AUDIO, "en")

        assert exc_info.value.stage == "segmentation"

    @pytest.mark.asyncio
    async def test_failure_waits_for_other_stage(self, orchestrator, fake_models):
        await orchestrator.prepare_models("cpu")
        fake_models.segmentation_model.error = RuntimeError("fast failure")
        fake_models.transcriber.delay = 0.2

        with pytest.raises(InferenceError):
            await orchestrator.transcribe(AUDIO, "en")

        assert len(fake_models.transcriber.calls) == 1

    @pytest.mark.asyncio
    async def test_failure_leaves_models_cached(self, orchestrator, fake_models):
        await orchestrator.prepare_models("cpu")
        fake_models.transcriber.error = RuntimeError("boom")

        with pytest.raises(InferenceError):
            await orchestrator.transcribe(AUDIO, "en")

        assert orchestrator.is_ready
        assert sum(fake_models.counts.values()) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("audio", [np.zeros(0), np.zeros((2, 100)), ["a", "b"]])
    async def test_invalid_audio(self, orchestrator, audio):
        await orchestrator.prepare_models("cpu")

        with pytest.raises(InvalidAudioError):
            await orchestrator.transcribe(audio, "en")
