"""Merge word timestamps with speaker segments."""

from typing import Iterable, Sequence

from speaker_scribe.core import NO_SPEAKER, SpeakerGroup, SpeakerSegment, Word
from speaker_scribe.utils import get_logger

logger = get_logger(__name__)


def align_words_to_segments(
    words: Sequence[Word],
    segments: Iterable[SpeakerSegment],
    no_speaker_label: str = NO_SPEAKER,
) -> list[SpeakerGroup]:
    """Partition start-ordered words into start-ordered speaker segments.

    Single forward scan: a word goes to the first kept segment whose end it
    fits under (``word.end <= segment.end``), so words straddling a boundary
    resolve toward the earlier segment. Segments labelled
    ``no_speaker_label`` are skipped without consuming words, segments that
    collect nothing are dropped, and words past the last segment end are
    left unassigned.

    Args:
        words: Transcribed words ordered by start
        segments: Speaker segments ordered by start

    Returns:
        One group per segment that collected at least one word
    """
    groups = []
    cursor = 0

    for segment in segments:
        if segment.label == no_speaker_label:
            continue

        collected = []
        while cursor < len(words) and words[cursor].end <= segment.end:
            collected.append(words[cursor])
            cursor += 1

        if collected:
            groups.append(
                SpeakerGroup(
                    label=segment.label,
                    start=segment.start,
                    end=segment.end,
                    words=tuple(collected),
                )
            )

    if cursor < len(words):
        logger.debug(f"{len(words) - cursor} trailing words fall outside every speaker segment")

    logger.info(f"Aligned {cursor}/{len(words)} words into {len(groups)} speaker groups")
    return groups


def speaker_labels(groups: Iterable[SpeakerGroup]) -> list[str]:
    """Distinct speaker labels in order of first appearance."""
    return list(dict.fromkeys(group.label for group in groups))
