"""Tests for the pyannote pre/post-processor (no model download needed)."""

import numpy as np
import pytest

from speaker_scribe.config import SegmentationConfig
from speaker_scribe.segmentation import PyannoteSegmentationProcessor, powerset_labels


def one_hot_logits(ids, num_classes=3, strength=20.0):
    logits = np.zeros((len(ids), num_classes))
    logits[np.arange(len(ids)), ids] = strength
    return logits[np.newaxis]


@pytest.fixture
def processor():
    return PyannoteSegmentationProcessor(sample_rate=16000)


class TestPreprocess:
    def test_shapes_batch_and_channel(self, processor):
        inputs = processor(np.ones(480, dtype=np.float64))

        assert inputs.shape == (1, 1, 480)
        assert inputs.dtype == np.float32


class TestPostProcess:
    def test_runs_become_spans(self, processor):
        logits = one_hot_logits([0, 0, 1, 1, 1, 2, 2, 0, 0, 0])

        spans = processor.post_process_speaker_diarization(logits, num_samples=16000)[0]

        assert [s["id"] for s in spans] == [0, 1, 2, 0]
        assert [(s["start"], s["end"]) for s in spans] == pytest.approx(
            [(0.0, 0.2), (0.2, 0.5), (0.5, 0.7), (0.7, 1.0)]
        )
        assert all(s["confidence"] == pytest.approx(1.0) for s in spans)

    def test_confidence_is_mean_probability(self, processor):
        # Two tied classes: argmax picks class 0 at p=0.5 each frame
        logits = np.array([[[1.0, 1.0, -50.0], [1.0, 1.0, -50.0]]])

        spans = processor.post_process_speaker_diarization(logits, num_samples=3200)[0]

        assert len(spans) == 1
        assert spans[0]["confidence"] == pytest.approx(0.5)
        assert spans[0]["end"] == pytest.approx(0.2)

    def test_accepts_unbatched_logits(self, processor):
        logits = one_hot_logits([1, 1, 2])[0]

        results = processor.post_process_speaker_diarization(logits, num_samples=4800)

        assert len(results) == 1
        assert [s["id"] for s in results[0]] == [1, 2]

    def test_one_result_per_batch_item(self, processor):
        logits = np.concatenate([one_hot_logits([0, 1]), one_hot_logits([2, 2])])

        results = processor.post_process_speaker_diarization(logits, num_samples=3200)

        assert [[s["id"] for s in r] for r in results] == [[0, 1], [2]]

    def test_no_frames(self, processor):
        results = processor.post_process_speaker_diarization(np.zeros((1, 0, 7)), num_samples=100)
        assert results == [[]]

    def test_plain_python_types(self, processor):
        span = processor.post_process_speaker_diarization(one_hot_logits([1]), 1600)[0][0]

        assert type(span["id"]) is int
        assert type(span["start"]) is float
        assert type(span["confidence"]) is float


class TestLoad:
    def test_load_reports_progress(self, recording_sink):
        processor = PyannoteSegmentationProcessor.load(SegmentationConfig(sample_rate=8000), recording_sink)

        assert processor.sample_rate == 8000
        assert [e["status"] for e in recording_sink.events] == ["initiate", "ready"]


class TestPowersetLabels:
    def test_segmentation_3_layout(self):
        labels = powerset_labels(["spk1", "spk2", "spk3"], max_set_size=2)

        assert labels == {
            0: "NO_SPEAKER",
            1: "SPEAKER_1",
            2: "SPEAKER_2",
            3: "SPEAKER_3",
            4: "SPEAKER_1 + SPEAKER_2",
            5: "SPEAKER_1 + SPEAKER_3",
            6: "SPEAKER_2 + SPEAKER_3",
        }

    def test_custom_silence_label(self):
        labels = powerset_labels(2, max_set_size=1, no_speaker_label="SILENCE")
        assert labels == {0: "SILENCE", 1: "SPEAKER_1", 2: "SPEAKER_2"}
