import pytest

from text_to_video.subtitles import format_timestamp, read_srt, render_srt, write_srt
from text_to_video.types import SubtitleCue


@pytest.mark.parametrize(
    "ms, expected",
    [
        (0, "00:00:00,000"),
        (61234, "00:01:01,234"),
        (3723004, "01:02:03,004"),
        (1999.9, "00:00:01,999"),
    ],
)
def test_format_timestamp(ms, expected) -> None:
    assert format_timestamp(ms) == expected


def test_format_timestamp_rejects_negative_values() -> None:
    with pytest.raises(ValueError):
        format_timestamp(-1)


def test_render_srt_numbers_cues_in_order() -> None:
    cues = [
        SubtitleCue(text="Hello world.", start_ms=0, end_ms=3000),
        SubtitleCue(text="Second cue.", start_ms=3000, end_ms=7500),
    ]

    rendered = render_srt(cues)

    assert rendered == (
        "1\n00:00:00,000 --> 00:00:03,000\nHello world.\n\n"
        "2\n00:00:03,000 --> 00:00:07,500\nSecond cue.\n\n"
    )


def test_render_srt_keeps_zero_length_cues() -> None:
    cues = [
        SubtitleCue(text="Silent.", start_ms=0, end_ms=0),
        SubtitleCue(text="Spoken.", start_ms=0, end_ms=1000),
    ]

    rendered = render_srt(cues)

    assert rendered.startswith("1\n00:00:00,000 --> 00:00:00,000\nSilent.\n\n2\n")


def test_write_and_read_srt(tmp_path) -> None:
    cues = [
        SubtitleCue(text="First.", start_ms=0, end_ms=1500),
        SubtitleCue(text="Second.", start_ms=1500, end_ms=4001),
    ]
    srt_path = tmp_path / "subtitles" / "subtitles.srt"

    write_srt(cues, srt_path)

    assert srt_path.exists()
    assert read_srt(srt_path) == cues
