"""Pydantic configuration schemas with validation."""

from typing import Literal
from pydantic import BaseModel, Field, model_validator


class TranscriptionConfig(BaseModel):
    """Word-level ASR configuration."""
    backend: Literal["faster-whisper"] = "faster-whisper"
    model_size: Literal["tiny", "base", "small", "medium", "large-v2", "large-v3"] = "base"
    chunk_length_s: int = Field(default=30, ge=1, le=30)
    beam_size: int = Field(default=5, ge=1)
    vad_filter: bool = False
    download_root: str | None = None


class SegmentationConfig(BaseModel):
    """Speaker segmentation configuration."""
    backend: Literal["pyannote"] = "pyannote"
    model: str = "pyannote/segmentation-3.0"
    sample_rate: int = Field(default=16000, ge=8000, le=48000)
    no_speaker_label: str = "NO_SPEAKER"
    token_env_vars: list[str] = Field(default_factory=lambda: ["HF_TOKEN", "HUGGINGFACE_TOKEN"])


class PipelineConfig(BaseModel):
    """Orchestration settings."""
    sample_rate: int = Field(default=16000, ge=8000, le=48000)
    default_device: Literal["cuda", "cpu"] = "cuda"
    warmup_seconds: float = Field(default=1.0, gt=0.0, le=30.0)
    warmup_language: str = "en"


class ScribeConfig(BaseModel):
    """Root configuration for speaker-scribe."""
    transcription: TranscriptionConfig = Field(default_factory=TranscriptionConfig)
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["simple", "detailed"] = "simple"

    @model_validator(mode="after")
    def check_sample_rates(self) -> "ScribeConfig":
        """Segmentation frames and decoded audio must share one sample rate."""
        if self.segmentation.sample_rate != self.pipeline.sample_rate:
            raise ValueError(
                f"segmentation.sample_rate ({self.segmentation.sample_rate}) must equal "
                f"pipeline.sample_rate ({self.pipeline.sample_rate})"
            )
        return self
