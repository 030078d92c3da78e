"""Pipeline orchestration."""

from speaker_scribe.pipeline.orchestrator import Orchestrator

__all__ = [
    "Orchestrator",
]
