"""Configuration management."""

from speaker_scribe.config.schema import (
    ScribeConfig,
    TranscriptionConfig,
    SegmentationConfig,
    PipelineConfig,
)
from speaker_scribe.config.loader import load_config, load_yaml, deep_merge, apply_env_overrides

__all__ = [
    # Main config
    "ScribeConfig",
    "load_config",
    # Sub-configs
    "TranscriptionConfig",
    "SegmentationConfig",
    "PipelineConfig",
    # Utilities
    "load_yaml",
    "deep_merge",
    "apply_env_overrides",
]
