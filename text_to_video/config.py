from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .types import DEFAULT_SEGMENT_DURATION_MS


@dataclass
class SegmenterConfig:
    """Limits used when packing sentences into spoken segments."""

    max_chars: int = 200
    min_chars: int = 20
    default_duration_ms: int = DEFAULT_SEGMENT_DURATION_MS
    filler: str = "This is the end of the segment."


@dataclass
class TTSConfig:
    """Configuration for text-to-speech synthesis."""

    provider: str = "coqui"
    model: Optional[str] = "tts_models/en/ljspeech/tacotron2-DDC"
    tts_bin: str = "tts"
    format: str = "wav"
    voice: str = "alloy"
    speaking_rate: float = 1.0
    api_base: Optional[str] = None
    api_key_env: Optional[str] = "OPENAI_API_KEY"
    edge_voice: str = "en-US-AriaNeural"
    edge_rate: str = "+0%"
    edge_volume: str = "+0%"
    timeout: Optional[float] = None


@dataclass
class EncoderConfig:
    ffmpeg_bin: str = "ffmpeg"
    ffprobe_bin: str = "ffprobe"


@dataclass
class VideoConfig:
    """Encoding settings for the final slideshow video."""

    frame_rate: float = 1  # one slide per second
    resolution: str = "1920x1080"
    codec: str = "libx264"
    preset: str = "fast"
    audio_codec: str = "aac"
    audio_bitrate: str = "128k"
    pixel_format: str = "yuv420p"
    shortest: bool = True


@dataclass
class SubtitleConfig:
    font: str = "Arial"
    font_size: int = 24
    color: str = "white"
    burn_in: bool = True


@dataclass
class BackgroundMusicConfig:
    enabled: bool = False
    volume: float = 0.3
    path: Optional[Path] = None


@dataclass
class PipelineConfig:
    """Top level configuration for the text-to-video agent."""

    segmenter: SegmenterConfig = field(default_factory=SegmenterConfig)
    tts: TTSConfig = field(default_factory=TTSConfig)
    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    video: VideoConfig = field(default_factory=VideoConfig)
    subtitles: SubtitleConfig = field(default_factory=SubtitleConfig)
    background_music: BackgroundMusicConfig = field(default_factory=BackgroundMusicConfig)
    output_root: Path = Path("output")
    overwrite: bool = True
    save_metadata: bool = True
