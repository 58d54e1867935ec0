"""Split raw text into bounded-length spoken segments.

Sentences are found by terminator punctuation only (``.``, ``!``, ``?``); there
is no linguistic analysis. Sentences are packed greedily into segments of at
most ``max_chars`` characters, and a short trailing segment is folded into the
previous one so the synthesis engine never receives a tiny fragment.

Text without any terminator yields a single segment regardless of its length.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .config import SegmenterConfig
from .errors import SegmentationError
from .types import TextSegment

WHITESPACE_RE = re.compile(r"\s+")
SENTENCE_RE = re.compile(r"[^.!?]*[.!?]+|[^.!?]+$")
TERMINATORS = ".!?"

QUOTE_TABLE = str.maketrans(
    {
        "“": '"',
        "”": '"',
        "„": '"',
        "‟": '"',
        "‘": "'",
        "’": "'",
        "‚": "'",
        "‛": "'",
    }
)


def normalize_text(text: str) -> str:
    """Collapse whitespace runs to single spaces, trim, and straighten curly quotes."""

    return WHITESPACE_RE.sub(" ", text.translate(QUOTE_TABLE)).strip()


def split_sentences(text: str) -> List[str]:
    """Return sentence candidates of already normalized text, in reading order."""

    sentences = []
    for match in SENTENCE_RE.finditer(text):
        sentence = match.group(0).strip()
        if sentence:
            sentences.append(sentence)
    return sentences


def _pad(text: str, filler: str) -> str:
    if text[-1] in TERMINATORS:
        return f"{text} {filler}"
    return f"{text}. {filler}"


def segment_text(text: str, config: Optional[SegmenterConfig] = None) -> List[TextSegment]:
    if not isinstance(text, str):
        raise SegmentationError(f"Expected text input, got {type(text).__name__}")
    config = config or SegmenterConfig()

    normalized = normalize_text(text)
    if not normalized:
        return []

    chunks: List[str] = []
    current = ""
    for sentence in split_sentences(normalized):
        if not current:
            current = sentence
        elif len(current) + 1 + len(sentence) > config.max_chars:
            chunks.append(current)
            current = sentence
        else:
            current = f"{current} {sentence}"

    if current:
        if len(current) >= config.min_chars:
            chunks.append(current)
        elif chunks:
            chunks[-1] = f"{chunks[-1]} {current}"
        else:
            chunks.append(_pad(current, config.filler))

    return [
        TextSegment(text=WHITESPACE_RE.sub(" ", chunk).strip(), duration_ms=config.default_duration_ms)
        for chunk in chunks
    ]
