"""Speaker segmentation module."""

from speaker_scribe.segmentation.base import (
    SegmentationModelRegistry,
    SegmentationProcessorRegistry,
)
from speaker_scribe.segmentation.pyannote import (
    PyannoteSegmentationModel,
    PyannoteSegmentationProcessor,
    powerset_labels,
)

__all__ = [
    "SegmentationModelRegistry",
    "SegmentationProcessorRegistry",
    "PyannoteSegmentationModel",
    "PyannoteSegmentationProcessor",
    "powerset_labels",
]
