from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_SEGMENT_DURATION_MS = 5000


@dataclass
class TextSegment:
    """Spoken unit of text; duration is a placeholder until the audio is measured."""

    text: str
    duration_ms: int = DEFAULT_SEGMENT_DURATION_MS


@dataclass(frozen=True)
class AudioSegment:
    """Synthesized audio for one text segment, with its measured duration."""

    text: str
    audio_path: Path
    duration_ms: int


@dataclass(frozen=True)
class SubtitleCue:
    text: str
    start_ms: int
    end_ms: int

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


@dataclass
class PipelineArtifacts:
    """Paths to the generated artifacts for a conversion run."""

    run_dir: Path
    video_path: Path
    combined_audio_path: Path
    subtitles_path: Path
    metadata_path: Optional[Path]
    segments: List[AudioSegment] = field(default_factory=list)
    cues: List[SubtitleCue] = field(default_factory=list)
