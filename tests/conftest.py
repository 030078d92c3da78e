"""Shared test fixtures: in-process fake model handles."""

import threading
import time
from collections import Counter

import numpy as np
import pytest
from fastapi.testclient import TestClient

from speaker_scribe.core import (
    BaseSegmentationModel,
    BaseSegmentationProcessor,
    BaseTranscriber,
    Word,
)
from speaker_scribe.models import ModelRegistry
from speaker_scribe.pipeline import Orchestrator


class FakeTranscriber(BaseTranscriber):
    """Returns canned words after an optional blocking delay."""

    def __init__(self, words=None, delay: float = 0.0, error: Exception | None = None):
        self.words = words if words is not None else [
            Word(" hi", (0.0, 0.4)),
            Word(" there", (0.5, 0.9)),
            Word(" bye", (2.0, 2.3)),
        ]
        self.delay = delay
        self.error = error
        self.calls = []

    @classmethod
    def load(cls, config, profile, progress=None):
        return cls()

    def transcribe(self, audio, language=None, chunk_length_s=30):
        self.calls.append({"samples": len(audio), "language": language, "chunk_length_s": chunk_length_s})
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return list(self.words)


class FakeSegmentationProcessor(BaseSegmentationProcessor):
    """Hands back canned spans regardless of the logits."""

    def __init__(self, spans=None):
        self.spans = spans if spans is not None else [
            {"id": 1, "start": 0.0, "end": 1.0, "confidence": 0.9},
            {"id": 0, "start": 1.0, "end": 1.8, "confidence": 0.8},
            {"id": 2, "start": 1.8, "end": 2.5, "confidence": 0.7},
        ]
        self.num_samples = []

    @classmethod
    def load(cls, config, progress=None):
        return cls()

    def __call__(self, audio):
        return np.asarray(audio, dtype=np.float32).reshape(1, 1, -1)

    def post_process_speaker_diarization(self, logits, num_samples):
        self.num_samples.append(num_samples)
        return [list(self.spans)]


class FakeSegmentationModel(BaseSegmentationModel):
    """Sleeps, then returns zero logits."""

    def __init__(self, delay: float = 0.0, error: Exception | None = None):
        self.delay = delay
        self.error = error

    @classmethod
    def load(cls, config, profile, progress=None):
        return cls()

    def __call__(self, inputs):
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return np.zeros((1, 10, 3), dtype=np.float32)

    @property
    def id2label(self):
        return {0: "NO_SPEAKER", 1: "SPEAKER_00", 2: "SPEAKER_01"}


class FakeModels:
    """Builds loader callables for ModelRegistry and records how often each ran."""

    def __init__(self):
        self.transcriber = FakeTranscriber()
        self.segmentation_processor = FakeSegmentationProcessor()
        self.segmentation_model = FakeSegmentationModel()
        self.load_delay = 0.0
        self.failures: dict[str, Exception] = {}
        self.counts = Counter()
        self.profiles = []
        self._lock = threading.Lock()

    def _loader(self, name):
        def load(profile, progress):
            with self._lock:
                self.counts[name] += 1
                self.profiles.append(profile)
            if progress is not None:
                progress.publish({"status": "initiate", "name": name})
            if self.load_delay:
                time.sleep(self.load_delay)
            if name in self.failures:
                raise self.failures[name]
            if progress is not None:
                progress.publish({"status": "ready", "name": name})
            return getattr(self, name)
        return load

    def loaders(self):
        return {
            name: self._loader(name)
            for name in ("transcriber", "segmentation_processor", "segmentation_model")
        }


class RecordingSink:
    """Progress sink that keeps every event."""

    def __init__(self):
        self.events = []
        self._lock = threading.Lock()

    def publish(self, event):
        with self._lock:
            self.events.append(event)


@pytest.fixture
def fake_models():
    return FakeModels()


@pytest.fixture
def registry(fake_models):
    return ModelRegistry(loaders=fake_models.loaders())


@pytest.fixture
def orchestrator(registry):
    return Orchestrator(registry=registry)


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def app(orchestrator):
    from speaker_scribe.api.app import create_app
    return create_app(orchestrator=orchestrator)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def words():
    return [
        Word("hi", (0.0, 0.4)),
        Word("there", (0.5, 0.9)),
        Word("bye", (2.0, 2.3)),
    ]
