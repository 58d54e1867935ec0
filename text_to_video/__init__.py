"""Turn plain text into a narrated slideshow video with synchronized subtitles."""

from .config import PipelineConfig
from .pipeline import TextToVideoAgent
from .segmentation import segment_text
from .timeline import build_timeline

__all__ = ["TextToVideoAgent", "PipelineConfig", "segment_text", "build_timeline"]
