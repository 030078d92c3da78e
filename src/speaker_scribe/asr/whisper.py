"""Faster Whisper word-level transcriber."""

from __future__ import annotations

import numpy as np

from speaker_scribe.asr.base import TranscriberRegistry
from speaker_scribe.core import BaseTranscriber, ModelLoadError, ProgressSink, Word
from speaker_scribe.config import TranscriptionConfig
from speaker_scribe.devices import DeviceProfile
from speaker_scribe.utils import get_logger, timed

logger = get_logger(__name__)

TASK = "automatic-speech-recognition"


@TranscriberRegistry.register("faster-whisper")
class FasterWhisperTranscriber(BaseTranscriber):
    """Whisper via CTranslate2, returning one Word per recognized token."""

    def __init__(self, model, config: TranscriptionConfig, profile: DeviceProfile):
        self._model = model
        self.config = config
        self.profile = profile

    @classmethod
    def load(
        cls,
        config: TranscriptionConfig,
        profile: DeviceProfile,
        progress: ProgressSink | None = None,
    ) -> FasterWhisperTranscriber:
        def emit(status: str, **extra) -> None:
            if progress is not None:
                progress.publish({"status": status, "name": config.model_size, "task": TASK, **extra})

        emit("initiate")
        try:
            from faster_whisper import WhisperModel
            from faster_whisper.utils import download_model

            emit("download")
            model_path = download_model(config.model_size, cache_dir=config.download_root)
            emit("done", file=model_path)

            logger.info(
                f"Loading Whisper {config.model_size} on {profile.backend} "
                f"({profile.transcription_precision})..."
            )
            model = WhisperModel(
                model_path,
                device=profile.backend,
                compute_type=profile.transcription_precision,
            )
        except Exception as e:
            raise ModelLoadError("transcriber", str(e)) from e

        emit("ready")
        logger.info("Whisper model loaded")
        return cls(model, config, profile)

    @timed
    def transcribe(
        self, audio: np.ndarray, language: str | None = None, chunk_length_s: int = 30
    ) -> list[Word]:
        """Transcribe a 16 kHz buffer into word-level timestamps.

        Args:
            audio: Mono float32 samples
            language: ISO language hint (None for auto-detect)
            chunk_length_s: Window length used internally for long audio

        Returns:
            Words ordered by start time
        """
        segments_iter, info = self._model.transcribe(
            audio,
            language=language,
            word_timestamps=True,
            chunk_length=chunk_length_s,
            beam_size=self.config.beam_size,
            vad_filter=self.config.vad_filter,
        )

        words = []
        for seg in segments_iter:
            for word in seg.words or ():
                words.append(Word(text=word.word, timestamp=(float(word.start), float(word.end))))

        logger.info(f"Transcribed {len(words)} words (language={info.language})")
        return words
