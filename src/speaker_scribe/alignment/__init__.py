"""Word-to-speaker alignment module."""

from speaker_scribe.alignment.aligner import align_words_to_segments, speaker_labels

__all__ = [
    "align_words_to_segments",
    "speaker_labels",
]
