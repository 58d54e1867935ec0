from pathlib import Path

import pytest
from pydub import AudioSegment as PydubSegment

from conftest import write_silence
from text_to_video.audio import combine_audio, mix_background_music
from text_to_video.errors import CombineFailure


def test_combine_audio_concatenates_in_given_order(tmp_path: Path) -> None:
    paths = [
        write_silence(tmp_path / "segment_0001.wav", 300),
        write_silence(tmp_path / "segment_0002.wav", 450),
        write_silence(tmp_path / "segment_0003.wav", 200),
    ]

    output = combine_audio(paths, tmp_path / "out" / "combined_audio.wav")

    assert output.exists()
    assert len(PydubSegment.from_file(output)) == 950


def test_combine_audio_resamples_mismatched_clips(tmp_path: Path) -> None:
    paths = [
        write_silence(tmp_path / "a.wav", 500, frame_rate=22050),
        write_silence(tmp_path / "b.wav", 500, frame_rate=16000),
    ]

    output = combine_audio(paths, tmp_path / "combined.wav")

    combined = PydubSegment.from_file(output)
    assert combined.frame_rate == 22050
    assert len(combined) == 1000


def test_combine_audio_requires_input(tmp_path: Path) -> None:
    with pytest.raises(CombineFailure, match="No audio files"):
        combine_audio([], tmp_path / "combined.wav")


def test_combine_audio_reports_missing_segment(tmp_path: Path) -> None:
    first = write_silence(tmp_path / "segment_0001.wav", 100)

    with pytest.raises(CombineFailure) as excinfo:
        combine_audio([first, tmp_path / "segment_0002.wav"], tmp_path / "combined.wav")

    assert excinfo.value.segment_index == 2


def test_mix_background_music_keeps_narration_length(tmp_path: Path) -> None:
    narration = write_silence(tmp_path / "narration.wav", 1200)
    music = write_silence(tmp_path / "music.wav", 500)

    output = mix_background_music(narration, music, 0.3, tmp_path / "mixed_audio.wav")

    assert len(PydubSegment.from_file(output)) == 1200


def test_mix_background_music_rejects_non_positive_volume(tmp_path: Path) -> None:
    narration = write_silence(tmp_path / "narration.wav", 100)

    with pytest.raises(CombineFailure, match="volume"):
        mix_background_music(narration, narration, 0, tmp_path / "mixed.wav")
