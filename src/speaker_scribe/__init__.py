"""speaker-scribe - local transcription with speaker-attributed words.

Usage:
    from speaker_scribe import Orchestrator, align_words_to_segments

    orchestrator = Orchestrator()
    await orchestrator.prepare_models("cuda")

    result = await orchestrator.transcribe(audio, language="en")
    groups = align_words_to_segments(result.words, result.segments)
"""

from speaker_scribe.pipeline import Orchestrator
from speaker_scribe.alignment import align_words_to_segments
from speaker_scribe.config import ScribeConfig, load_config
from speaker_scribe.core import SpeakerGroup, SpeakerSegment, TranscriptionResult, Word

__version__ = "0.1.0"

__all__ = [
    "Orchestrator",
    "ScribeConfig",
    "SpeakerGroup",
    "SpeakerSegment",
    "TranscriptionResult",
    "Word",
    "align_words_to_segments",
    "load_config",
]
