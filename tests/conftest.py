import sys
from pathlib import Path
from typing import Dict, List

import pytest
from pydub import AudioSegment as PydubSegment

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from text_to_video.config import PipelineConfig, TTSConfig  # noqa: E402
from text_to_video.tts import BaseTTS  # noqa: E402


def write_silence(path: Path, duration_ms: int, frame_rate: int = 22050) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    PydubSegment.silent(duration=duration_ms, frame_rate=frame_rate).export(path, format="wav")
    return path


class FakeTTS(BaseTTS):
    """Writes silent WAV files whose length is looked up by segment text."""

    name = "fake"

    def __init__(self, durations: Dict[str, int] = None, default_ms: int = 1000):
        super().__init__(TTSConfig(provider="fake"))
        self.durations = durations or {}
        self.default_ms = default_ms
        self.calls: List[str] = []

    def synthesize(self, text: str, output_path: Path) -> None:
        self.calls.append(text)
        write_silence(output_path, self.durations.get(text, self.default_ms))


@pytest.fixture
def fake_tts() -> FakeTTS:
    return FakeTTS()


@pytest.fixture
def pipeline_config(tmp_path: Path) -> PipelineConfig:
    return PipelineConfig(output_root=tmp_path / "output")


@pytest.fixture
def slides_dir(tmp_path: Path) -> Path:
    slides = tmp_path / "slides"
    slides.mkdir()
    for idx in (1, 2):
        (slides / f"slide{idx}.jpg").write_bytes(b"jpeg")
    return slides
