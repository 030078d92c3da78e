"""PyAnnote speaker segmentation: frame classifier plus its pre/post-processor."""

from __future__ import annotations

import os
from itertools import combinations
from typing import Any

import numpy as np

from speaker_scribe.segmentation.base import (
    SegmentationModelRegistry,
    SegmentationProcessorRegistry,
)
from speaker_scribe.core import (
    BaseSegmentationModel,
    BaseSegmentationProcessor,
    ModelLoadError,
    ProgressSink,
)
from speaker_scribe.config import SegmentationConfig
from speaker_scribe.devices import DeviceProfile
from speaker_scribe.utils import get_logger, timed

logger = get_logger(__name__)

TASK = "audio-frame-classification"


def _softmax(scores: np.ndarray) -> np.ndarray:
    shifted = scores - scores.max(axis=-1, keepdims=True)
    exp = np.exp(shifted)
    return exp / exp.sum(axis=-1, keepdims=True)


def powerset_labels(
    classes: list[str] | int, max_set_size: int, no_speaker_label: str = "NO_SPEAKER"
) -> dict[int, str]:
    """Label every powerset class in pyannote's ordering.

    Sets are enumerated by size, then lexicographically: the empty set,
    each single speaker, then each pair, and so on.
    """
    num_classes = classes if isinstance(classes, int) else len(classes)
    names = [f"SPEAKER_{i + 1}" for i in range(num_classes)]

    id2label = {}
    for size in range(max_set_size + 1):
        for members in combinations(range(num_classes), size):
            label = " + ".join(names[m] for m in members) if members else no_speaker_label
            id2label[len(id2label)] = label
    return id2label


@SegmentationProcessorRegistry.register("pyannote")
class PyannoteSegmentationProcessor(BaseSegmentationProcessor):
    """Shapes raw waveforms for pyannote and decodes powerset logits."""

    def __init__(self, sample_rate: int = 16000):
        self.sample_rate = sample_rate

    @classmethod
    def load(
        cls, config: SegmentationConfig, progress: ProgressSink | None = None
    ) -> PyannoteSegmentationProcessor:
        if progress is not None:
            progress.publish({"status": "initiate", "name": config.model, "file": "processor"})
        processor = cls(sample_rate=config.sample_rate)
        if progress is not None:
            progress.publish({"status": "ready", "name": config.model, "file": "processor"})
        return processor

    def __call__(self, audio: np.ndarray) -> np.ndarray:
        """Return a (batch=1, channel=1, samples) float32 array."""
        return np.asarray(audio, dtype=np.float32).reshape(1, 1, -1)

    def post_process_speaker_diarization(
        self, logits: np.ndarray, num_samples: int
    ) -> list[list[dict[str, Any]]]:
        """Collapse per-frame argmax classes into contiguous spans.

        Frame duration is derived from how many frames the model produced for
        ``num_samples`` input samples. Confidence is the mean probability of
        the winning class over the span's frames.
        """
        logits = np.asarray(logits, dtype=np.float64)
        if logits.ndim == 2:
            logits = logits[np.newaxis]

        results = []
        for scores in logits:
            num_frames = scores.shape[0]
            if num_frames == 0:
                results.append([])
                continue

            seconds_per_frame = num_samples / num_frames / self.sample_rate
            probs = _softmax(scores)
            ids = probs.argmax(axis=-1)
            best = probs[np.arange(num_frames), ids]

            boundaries = np.flatnonzero(np.diff(ids)) + 1
            starts = np.concatenate(([0], boundaries))
            ends = np.concatenate((boundaries, [num_frames]))

            results.append([
                {
                    "id": int(ids[start]),
                    "start": float(start * seconds_per_frame),
                    "end": float(end * seconds_per_frame),
                    "confidence": float(best[start:end].mean()),
                }
                for start, end in zip(starts, ends)
            ])
        return results


@SegmentationModelRegistry.register("pyannote")
class PyannoteSegmentationModel(BaseSegmentationModel):
    """pyannote.audio segmentation model pinned to the profile's segmentation device."""

    def __init__(self, model, device: str, id2label: dict[int, str]):
        self._model = model
        self._device = device
        self._id2label = id2label

    @classmethod
    def load(
        cls,
        config: SegmentationConfig,
        profile: DeviceProfile,
        progress: ProgressSink | None = None,
    ) -> PyannoteSegmentationModel:
        def emit(status: str, **extra) -> None:
            if progress is not None:
                progress.publish({"status": status, "name": config.model, "task": TASK, **extra})

        emit("initiate")
        try:
            import torch
            from pyannote.audio import Model

            emit("download")
            logger.info(
                f"Loading segmentation model {config.model} on "
                f"{profile.segmentation_device} ({profile.segmentation_precision})..."
            )
            model = Model.from_pretrained(config.model, token=_get_hf_token(config))
            if model is None:
                raise RuntimeError(f"{config.model} could not be downloaded (gated model without token?)")
            emit("done")

            dtype = getattr(torch, profile.segmentation_precision)
            model = model.to(device=torch.device(profile.segmentation_device), dtype=dtype)
            model.eval()

            specs = model.specifications
            if isinstance(specs, tuple):
                specs = specs[0]
            if not specs.powerset:
                raise RuntimeError(f"{config.model} is not a powerset segmentation model")
            id2label = powerset_labels(specs.classes, specs.powerset_max_classes, config.no_speaker_label)
        except Exception as e:
            raise ModelLoadError("segmentation_model", str(e)) from e

        emit("ready")
        logger.info(f"Segmentation model loaded ({len(id2label)} classes)")
        return cls(model, profile.segmentation_device, id2label)

    @property
    def id2label(self) -> dict[int, str]:
        return self._id2label

    @timed
    def __call__(self, inputs: np.ndarray) -> np.ndarray:
        import torch

        waveforms = torch.from_numpy(np.ascontiguousarray(inputs)).to(self._device)
        with torch.inference_mode():
            logits = self._model(waveforms)
        return logits.detach().cpu().numpy()


def _get_hf_token(config: SegmentationConfig) -> str | None:
    """HuggingFace token from the first configured environment variable that is set."""
    for name in config.token_env_vars:
        token = os.environ.get(name)
        if token:
            return token

    logger.warning(
        "No HuggingFace token found. Set HF_TOKEN; pyannote models require "
        "accepting their license at huggingface.co"
    )
    return None
