"""Segmentation processor and model registries."""

from speaker_scribe.core import Registry, BaseSegmentationProcessor, BaseSegmentationModel

# Both halves of a segmentation backend register under the same key
SegmentationProcessorRegistry = Registry[BaseSegmentationProcessor]("segmentation_processor")
SegmentationModelRegistry = Registry[BaseSegmentationModel]("segmentation_model")
