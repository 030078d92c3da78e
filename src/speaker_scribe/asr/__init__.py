"""ASR (Automatic Speech Recognition) module."""

from speaker_scribe.asr.base import TranscriberRegistry
from speaker_scribe.asr.whisper import FasterWhisperTranscriber

__all__ = [
    "TranscriberRegistry",
    "FasterWhisperTranscriber",
]
