"""Data classes and abstract interfaces shared across the pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol

import numpy as np

if TYPE_CHECKING:
    from speaker_scribe.config import SegmentationConfig, TranscriptionConfig
    from speaker_scribe.devices import DeviceProfile

NO_SPEAKER = "NO_SPEAKER"
SAMPLE_RATE = 16000


@dataclass(frozen=True)
class Word:
    """A recognized token with its (start, end) timestamp in seconds."""
    text: str
    timestamp: tuple[float, float]

    @property
    def start(self) -> float:
        return self.timestamp[0]

    @property
    def end(self) -> float:
        return self.timestamp[1]

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "timestamp": [self.start, self.end]}


@dataclass(frozen=True)
class SpeakerSegment:
    """A contiguous time span attributed to one speaker label."""
    id: int
    label: str
    start: float  # seconds
    end: float  # seconds
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "start": self.start,
            "end": self.end,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class SpeakerGroup:
    """Words attributed to one speaker segment."""
    label: str
    start: float
    end: float
    words: tuple[Word, ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        return " ".join(w.text.strip() for w in self.words)

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "start": self.start,
            "end": self.end,
            "words": [w.to_dict() for w in self.words],
        }


@dataclass
class TranscriptionResult:
    """Joined output of one transcribe call."""
    words: list[Word]
    segments: list[SpeakerSegment]
    elapsed_ms: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "transcript": [w.to_dict() for w in self.words],
            "segments": [s.to_dict() for s in self.segments],
        }


class ProgressSink(Protocol):
    """Anything accepting loader progress events."""

    def publish(self, event: dict[str, Any]) -> None:
        ...


class BaseTranscriber(ABC):
    """Word-level speech recognition engine."""

    @classmethod
    @abstractmethod
    def load(
        cls,
        config: TranscriptionConfig,
        profile: DeviceProfile,
        progress: ProgressSink | None = None,
    ) -> BaseTranscriber:
        """Download and initialize the engine (blocking)."""
        pass

    @abstractmethod
    def transcribe(
        self, audio: np.ndarray, language: str | None = None, chunk_length_s: int = 30
    ) -> list[Word]:
        """Transcribe a 16 kHz mono buffer into timestamped words."""
        pass


class BaseSegmentationProcessor(ABC):
    """Prepares model inputs and turns frame logits into speaker spans."""

    @classmethod
    @abstractmethod
    def load(
        cls, config: SegmentationConfig, progress: ProgressSink | None = None
    ) -> BaseSegmentationProcessor:
        pass

    @abstractmethod
    def __call__(self, audio: np.ndarray) -> np.ndarray:
        """Shape a mono buffer into model input."""
        pass

    @abstractmethod
    def post_process_speaker_diarization(
        self, logits: np.ndarray, num_samples: int
    ) -> list[list[dict[str, Any]]]:
        """Per batch item, ``{"id", "start", "end", "confidence"}`` spans ordered by start."""
        pass


class BaseSegmentationModel(ABC):
    """Frame-level speaker activity classifier."""

    @classmethod
    @abstractmethod
    def load(
        cls,
        config: SegmentationConfig,
        profile: DeviceProfile,
        progress: ProgressSink | None = None,
    ) -> BaseSegmentationModel:
        pass

    @abstractmethod
    def __call__(self, inputs: np.ndarray) -> np.ndarray:
        """Return logits of shape (batch, frames, classes)."""
        pass

    @property
    @abstractmethod
    def id2label(self) -> dict[int, str]:
        """Class index to human-readable speaker label."""
        pass


class ModelSet(NamedTuple):
    """The three live handles owned by the model registry."""
    transcriber: BaseTranscriber
    segmentation_processor: BaseSegmentationProcessor
    segmentation_model: BaseSegmentationModel
