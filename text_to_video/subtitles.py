"""SRT rendering for timeline cues.

Timestamps are floored to the whole millisecond. Cue times are integral
milliseconds already, so flooring only matters for callers that hand in
fractional values; it is applied the same way to every boundary so cue
ends and starts stay identical.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
from pathlib import Path
from typing import Iterable, List, Union

import srt

from .types import SubtitleCue

logger = logging.getLogger(__name__)


def _to_timedelta(ms: Union[int, float]) -> dt.timedelta:
    return dt.timedelta(milliseconds=int(math.floor(ms)))


def format_timestamp(ms: Union[int, float]) -> str:
    """Format milliseconds as ``HH:MM:SS,mmm``."""

    if ms < 0:
        raise ValueError(f"Timestamp cannot be negative: {ms}")
    return srt.timedelta_to_srt_timestamp(_to_timedelta(ms))


def render_srt(cues: Iterable[SubtitleCue]) -> str:
    subtitles = [
        srt.Subtitle(index=idx, start=_to_timedelta(cue.start_ms), end=_to_timedelta(cue.end_ms), content=cue.text)
        for idx, cue in enumerate(cues, start=1)
    ]
    # reindex would sort and drop zero-length cues
    return srt.compose(subtitles, reindex=False)


def write_srt(cues: Iterable[SubtitleCue], output_path: Path) -> Path:
    cues = list(cues)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_srt(cues), encoding="utf-8")
    logger.info("Wrote %s subtitle cues to %s", len(cues), output_path)
    return output_path


def read_srt(srt_path: Path) -> List[SubtitleCue]:
    """Parse an existing SRT file back into cues."""

    content = srt_path.read_text(encoding="utf-8")
    return [
        SubtitleCue(
            text=subtitle.content,
            start_ms=subtitle.start // dt.timedelta(milliseconds=1),
            end_ms=subtitle.end // dt.timedelta(milliseconds=1),
        )
        for subtitle in srt.parse(content)
    ]
