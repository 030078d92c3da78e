"""Core components: data classes, base interfaces, registry, exceptions."""

from speaker_scribe.core.registry import Registry
from speaker_scribe.core.base import (
    NO_SPEAKER,
    SAMPLE_RATE,
    Word,
    SpeakerSegment,
    SpeakerGroup,
    TranscriptionResult,
    ModelSet,
    ProgressSink,
    BaseTranscriber,
    BaseSegmentationProcessor,
    BaseSegmentationModel,
)
from speaker_scribe.core.exceptions import (
    ScribeError,
    ConfigError,
    RegistryError,
    UnsupportedDeviceError,
    ModelLoadError,
    InferenceError,
    NotReadyError,
    InvalidAudioError,
)

__all__ = [
    # Registry
    "Registry",
    # Constants
    "NO_SPEAKER",
    "SAMPLE_RATE",
    # Data classes
    "Word",
    "SpeakerSegment",
    "SpeakerGroup",
    "TranscriptionResult",
    "ModelSet",
    # Base classes
    "ProgressSink",
    "BaseTranscriber",
    "BaseSegmentationProcessor",
    "BaseSegmentationModel",
    # Exceptions
    "ScribeError",
    "ConfigError",
    "RegistryError",
    "UnsupportedDeviceError",
    "ModelLoadError",
    "InferenceError",
    "NotReadyError",
    "InvalidAudioError",
]
