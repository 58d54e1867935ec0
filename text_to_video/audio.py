from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from pydub import AudioSegment as PydubSegment
from pydub.exceptions import CouldntDecodeError
from pydub.utils import ratio_to_db

from .errors import CombineFailure

logger = logging.getLogger(__name__)


def _load(path: Path, index: Optional[int] = None) -> PydubSegment:
    try:
        return PydubSegment.from_file(path)
    except (CouldntDecodeError, OSError) as exc:
        raise CombineFailure("Could not decode audio", segment_index=index, path=path, detail=str(exc)) from exc


def _export(audio: PydubSegment, output_path: Path) -> None:
    audio_format = output_path.suffix.lstrip(".") or "wav"
    try:
        audio.export(output_path, format=audio_format)
    except (CouldntDecodeError, OSError) as exc:
        raise CombineFailure("Could not export audio", path=output_path, detail=str(exc)) from exc


def combine_audio(audio_paths: Iterable[Path], output_path: Path) -> Path:
    """Concatenate audio files end to end, in exactly the order given."""

    audio_paths = list(audio_paths)
    if not audio_paths:
        raise CombineFailure("No audio files provided for concatenation.", path=output_path)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    combined = _load(audio_paths[0], index=1)
    for idx, path in enumerate(audio_paths[1:], start=2):
        clip = _load(path, index=idx)
        if clip.frame_rate != combined.frame_rate:
            clip = clip.set_frame_rate(combined.frame_rate)
        if clip.channels != combined.channels:
            clip = clip.set_channels(combined.channels)
        combined += clip

    _export(combined, output_path)
    logger.info("Combined %s audio segments (%s ms) into %s", len(audio_paths), len(combined), output_path)
    return output_path


def mix_background_music(narration_path: Path, music_path: Path, volume: float, output_path: Path) -> Path:
    """Lay a looped music bed under the narration, keeping the narration's length."""

    if volume <= 0:
        raise CombineFailure(f"Background music volume must be positive, got {volume}", path=music_path)

    narration = _load(narration_path)
    music = _load(music_path)
    if len(music) == 0:
        raise CombineFailure("Background music is empty", path=music_path)
    if music.frame_rate != narration.frame_rate:
        music = music.set_frame_rate(narration.frame_rate)
    music = music.apply_gain(ratio_to_db(volume))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    mixed = narration.overlay(music, loop=True)
    _export(mixed, output_path)
    logger.info("Mixed background music %s at volume %.2f into %s", music_path, volume, output_path)
    return output_path
