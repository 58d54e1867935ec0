from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class TextToVideoError(RuntimeError):
    """Base class for every failure that aborts a conversion run."""

    def __init__(
        self,
        message: str,
        *,
        segment_index: Optional[int] = None,
        path: Optional[Union[str, Path]] = None,
        detail: Optional[str] = None,
    ):
        self.message = message
        self.segment_index = segment_index
        self.path = Path(path) if path is not None else None
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.segment_index is not None:
            parts.append(f"segment={self.segment_index}")
        if self.path is not None:
            parts.append(f"path={self.path}")
        rendered = " | ".join(parts)
        if self.detail:
            rendered = f"{rendered}\n{self.detail.strip()}"
        return rendered


class SegmentationError(TextToVideoError):
    pass


class SynthesisFailure(TextToVideoError):
    pass


class ProbeFailure(TextToVideoError):
    pass


class InvalidDuration(TextToVideoError, ValueError):
    pass


class CombineFailure(TextToVideoError):
    pass


class ComposeFailure(TextToVideoError):
    pass


class ZeroDurationWarning(UserWarning):
    """A segment measured at 0 ms, usually a sign the synthesis engine produced silence."""
