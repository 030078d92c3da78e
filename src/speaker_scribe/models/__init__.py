"""Model lifecycle: cached handles and loading progress."""

from speaker_scribe.models.progress import ProgressChannel
from speaker_scribe.models.registry import (
    HANDLES,
    ModelRegistry,
    default_loaders,
    get_model_registry,
)

__all__ = [
    "HANDLES",
    "ModelRegistry",
    "ProgressChannel",
    "default_loaders",
    "get_model_registry",
]
