"""Transcriber registry."""

from speaker_scribe.core import Registry, BaseTranscriber

# Transcription backends register here, keyed by TranscriptionConfig.backend
TranscriberRegistry = Registry[BaseTranscriber]("transcriber")
