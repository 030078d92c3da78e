"""Host channel: message worker and FastAPI app."""

from speaker_scribe.api.app import create_app
from speaker_scribe.api.worker import PipelineWorker

__all__ = [
    "create_app",
    "PipelineWorker",
]
