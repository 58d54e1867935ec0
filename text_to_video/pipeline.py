from __future__ import annotations

import json
import logging
import shutil
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from .audio import combine_audio, mix_background_music
from .config import PipelineConfig
from .errors import SegmentationError, TextToVideoError
from .ffmpeg_utils import probe_duration_ms
from .segmentation import segment_text
from .subtitles import write_srt
from .timeline import build_timeline, total_duration_ms
from .tts import BaseTTS, build_tts
from .types import PipelineArtifacts
from .video import check_compose_settings, compose_video

logger = logging.getLogger(__name__)

FAILED_MARKER = "FAILED"


class TextToVideoAgent:
    """Drives segmentation, speech synthesis, subtitle timing and video composition."""

    def __init__(self, config: Optional[PipelineConfig] = None, tts: Optional[BaseTTS] = None):
        self.config = config or PipelineConfig()
        self.tts = tts or build_tts(self.config.tts)

    def convert(self, text: str, image_pattern: str, run_name: Optional[str] = None) -> PipelineArtifacts:
        started = time.monotonic()
        image_dir = Path(image_pattern).parent
        if not image_dir.is_dir():
            raise FileNotFoundError(f"Image directory does not exist: {image_dir}")
        music = self.config.background_music
        if music.enabled and music.path is None:
            raise ValueError("Background music is enabled but no path is configured")
        check_compose_settings(self.config.video, self.config.subtitles)

        run_name = run_name or self._default_run_name()
        run_dir = self.config.output_root.resolve() / run_name
        if run_dir.exists() and not self.config.overwrite:
            raise FileExistsError(f"{run_dir} already exists and overwrite=False")

        logger.info("Starting text-to-video run '%s'", run_name)
        self._create_run_dirs(run_dir)

        try:
            artifacts = self._run(text, image_pattern, run_dir)
        except TextToVideoError as exc:
            self._mark_failed(run_dir, exc)
            raise

        if self.config.save_metadata:
            self._save_metadata(artifacts, text, image_pattern, started)
        logger.info("Text-to-video run completed. Artifacts: %s", artifacts)
        return artifacts

    def _run(self, text: str, image_pattern: str, run_dir: Path) -> PipelineArtifacts:
        audio_dir = run_dir / "audio"

        logger.info("Step 1/5: Splitting text into segments...")
        segments = segment_text(text, self.config.segmenter)
        if not segments:
            raise SegmentationError("Input contains no speakable text")
        logger.info("Split text into %s segments", len(segments))

        logger.info("Step 2/5: Generating TTS audio segments...")
        audio_segments = self.tts.synthesize_segments(
            segments, output_dir=audio_dir, measure_duration=self._measure_duration
        )

        logger.info("Step 3/5: Combining audio segments...")
        narration_path = combine_audio(
            [segment.audio_path for segment in audio_segments], audio_dir / "combined_audio.wav"
        )
        narration_path = self._maybe_mix_music(narration_path)

        logger.info("Step 4/5: Building subtitle timeline...")
        cues = build_timeline(audio_segments)
        subtitles_path = write_srt(cues, run_dir / "subtitles" / "subtitles.srt")

        logger.info("Step 5/5: Composing video...")
        video_path = compose_video(
            image_pattern,
            narration_path,
            subtitles_path,
            run_dir / "video" / "output.mp4",
            video=self.config.video,
            subtitles=self.config.subtitles,
            ffmpeg_bin=self.config.encoder.ffmpeg_bin,
        )

        return PipelineArtifacts(
            run_dir=run_dir,
            video_path=video_path,
            combined_audio_path=narration_path,
            subtitles_path=subtitles_path,
            metadata_path=run_dir / "metadata.json" if self.config.save_metadata else None,
            segments=audio_segments,
            cues=cues,
        )

    def _measure_duration(self, audio_path: Path) -> int:
        return probe_duration_ms(audio_path, ffprobe_bin=self.config.encoder.ffprobe_bin)

    def _maybe_mix_music(self, narration_path: Path) -> Path:
        music = self.config.background_music
        if not music.enabled:
            return narration_path
        return mix_background_music(
            narration_path, Path(music.path), music.volume, narration_path.with_name("mixed_audio.wav")
        )

    def _create_run_dirs(self, run_dir: Path) -> None:
        if run_dir.exists():
            logger.info("Clearing artifacts of a previous run in %s", run_dir)
        for name in ("audio", "video", "subtitles"):
            shutil.rmtree(run_dir / name, ignore_errors=True)
            (run_dir / name).mkdir(parents=True, exist_ok=True)
        for name in (FAILED_MARKER, "metadata.json", "text.txt"):
            (run_dir / name).unlink(missing_ok=True)

    def _mark_failed(self, run_dir: Path, exc: TextToVideoError) -> None:
        logger.error("Run in %s failed: %s", run_dir, exc)
        (run_dir / FAILED_MARKER).write_text(f"{type(exc).__name__}: {exc}\n", encoding="utf-8")

    def _save_metadata(self, artifacts: PipelineArtifacts, text: str, image_pattern: str, started: float) -> Path:
        run_dir = artifacts.run_dir
        metadata_path = artifacts.metadata_path or run_dir / "metadata.json"
        cues = artifacts.cues
        (run_dir / "text.txt").write_text(text, encoding="utf-8")
        payload = {
            "timestamp": datetime.now().isoformat(timespec="seconds"),
            "processing_time_ms": int((time.monotonic() - started) * 1000),
            "audio_duration_ms": total_duration_ms(cues),
            "segment_count": len(artifacts.segments),
            "image_pattern": str(image_pattern),
            "segments": [
                {
                    "text": cue.text,
                    "start_ms": cue.start_ms,
                    "end_ms": cue.end_ms,
                    "audio_path": str(segment.audio_path),
                }
                for segment, cue in zip(artifacts.segments, cues)
            ],
        }
        metadata_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        return metadata_path

    def _default_run_name(self) -> str:
        return datetime.now().strftime("%Y%m%d-%H%M%S")
