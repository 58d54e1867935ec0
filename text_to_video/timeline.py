from __future__ import annotations

import logging
import warnings
from typing import Iterable, List

from .errors import InvalidDuration, ZeroDurationWarning
from .types import AudioSegment, SubtitleCue

logger = logging.getLogger(__name__)


def build_timeline(segments: Iterable[AudioSegment]) -> List[SubtitleCue]:
    """Lay segments end to end starting at 0 ms, one cue per segment.

    All durations are validated before any cue is built, so a negative
    duration never yields a partial timeline.
    """

    segments = list(segments)
    for idx, segment in enumerate(segments, start=1):
        if segment.duration_ms < 0:
            raise InvalidDuration(
                f"Negative duration {segment.duration_ms} ms",
                segment_index=idx,
                path=segment.audio_path,
            )

    cues: List[SubtitleCue] = []
    cursor = 0
    for idx, segment in enumerate(segments, start=1):
        if segment.duration_ms == 0:
            logger.warning("Segment %s (%s) has zero duration", idx, segment.audio_path)
            warnings.warn(
                f"Segment {idx} ({segment.audio_path}) has zero duration; synthesis may have failed",
                ZeroDurationWarning,
                stacklevel=2,
            )
        cues.append(SubtitleCue(text=segment.text, start_ms=cursor, end_ms=cursor + segment.duration_ms))
        cursor += segment.duration_ms

    logger.debug("Built timeline of %s cues spanning %s ms", len(cues), cursor)
    return cues


def total_duration_ms(cues: Iterable[SubtitleCue]) -> int:
    cues = list(cues)
    return cues[-1].end_ms if cues else 0
