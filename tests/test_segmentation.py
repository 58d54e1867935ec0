"""Behavior tests for sentence packing and short-segment handling."""

import pytest

from text_to_video.config import SegmenterConfig
from text_to_video.errors import SegmentationError
from text_to_video.segmentation import normalize_text, segment_text, split_sentences


def _sentence(words: int, end: str = ".") -> str:
    return " ".join(["word"] * words) + end


def test_empty_and_whitespace_input_yield_no_segments() -> None:
    assert segment_text("") == []
    assert segment_text("  \n\n \t ") == []


def test_two_short_sentences_fit_in_one_segment() -> None:
    segments = segment_text("Hello world. This is a test.")

    assert [s.text for s in segments] == ["Hello world. This is a test."]
    assert segments[0].duration_ms == 5000


def test_normalize_collapses_whitespace_and_straightens_quotes() -> None:
    raw = "  “Quoted” text\n\n  with   it’s \r\n gaps  "

    assert normalize_text(raw) == "\"Quoted\" text with it's gaps"


def test_split_sentences_keeps_trailing_fragment() -> None:
    assert split_sentences("One. Two?! three") == ["One.", "Two?!", "three"]


def test_text_without_terminators_is_one_segment_even_when_long() -> None:
    text = " ".join(["word"] * 100)

    segments = segment_text(text)

    assert len(segments) == 1
    assert segments[0].text == text
    assert len(segments[0].text) > 200


def test_sentences_are_packed_up_to_max_chars() -> None:
    sentences = [_sentence(15) for _ in range(6)]  # 75 chars each
    text = " ".join(sentences)

    segments = segment_text(text)

    assert [len(s.text) for s in segments] == [151, 151, 151]
    assert all(len(s.text) <= 200 for s in segments)


def test_sentence_exactly_reaching_threshold_is_appended() -> None:
    first = "a" * 99 + "."
    second = "b" * 98 + "."
    third = "Another closing sentence here."

    segments = segment_text(f"{first} {second} {third}")

    assert segments[0].text == f"{first} {second}"
    assert len(segments[0].text) == 200
    assert segments[1].text == third


def test_oversized_single_sentence_stays_whole() -> None:
    long_sentence = _sentence(60)
    text = f"{long_sentence} A normal closing sentence."

    segments = segment_text(text)

    assert segments[0].text == long_sentence
    assert len(segments[0].text) > 200
    assert segments[1].text == "A normal closing sentence."


def test_short_trailing_sentence_is_merged_into_previous_segment() -> None:
    first = "x" * 120 + "."
    second = "y" * 189 + "."
    third = "Short ending."  # 13 chars, does not fit after the 190-char sentence

    segments = segment_text(f"{first} {second} {third}")

    assert [s.text for s in segments] == [first, f"{second} {third}"]
    assert len(segments[-1].text) > 200


def test_single_short_sentence_is_padded() -> None:
    segments = segment_text("Hi.")

    assert len(segments) == 1
    assert segments[0].text == "Hi. This is the end of the segment."
    assert len(segments[0].text) >= 20


def test_padding_adds_terminator_when_missing() -> None:
    segments = segment_text("hello")

    assert segments[0].text == "hello. This is the end of the segment."


def test_no_content_is_dropped() -> None:
    text = "First sentence is here!  Second one follows?\nThird... and a tail without end"

    segments = segment_text(text)

    assert " ".join(s.text for s in segments) == normalize_text(text)


def test_custom_limits_are_honoured() -> None:
    config = SegmenterConfig(max_chars=30, min_chars=5, default_duration_ms=1234)

    segments = segment_text("One two three. Four five six. Seven eight nine.", config)

    assert [s.text for s in segments] == ["One two three. Four five six.", "Seven eight nine."]
    assert {s.duration_ms for s in segments} == {1234}


def test_non_text_input_raises_segmentation_error() -> None:
    with pytest.raises(SegmentationError):
        segment_text(None)  # type: ignore[arg-type]


def test_final_chunk_at_min_chars_stays_standalone() -> None:
    first = "x" * 189 + "."
    last = "z" * 19 + "."  # exactly 20 chars

    segments = segment_text(f"{first} {last}")

    assert [s.text for s in segments] == [first, last]


def test_final_chunk_one_below_min_chars_is_merged() -> None:
    first = "x" * 189 + "."
    last = "z" * 18 + "."  # 19 chars

    segments = segment_text(f"{first} {last}")

    assert [s.text for s in segments] == [f"{first} {last}"]
