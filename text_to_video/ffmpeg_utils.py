from __future__ import annotations

import logging
import math
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from .errors import ProbeFailure

logger = logging.getLogger(__name__)


def render_command(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in cmd)


def run_command(
    cmd: Sequence[str], cwd: Optional[Path] = None, timeout: Optional[float] = None
) -> subprocess.CompletedProcess:
    """Run an external tool without a shell and capture its output.

    Raises ``subprocess.CalledProcessError`` on a non-zero exit and
    ``FileNotFoundError`` when the binary is missing; callers translate
    these into pipeline errors.
    """

    cmd = [str(part) for part in cmd]
    logger.debug("Running: %s", render_command(cmd))
    return subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        check=True,
        timeout=timeout,
    )


def probe_duration_ms(audio_path: Path, ffprobe_bin: str = "ffprobe") -> int:
    """Return the duration of ``audio_path`` in whole milliseconds (floored)."""

    cmd = [
        ffprobe_bin,
        "-v",
        "error",
        "-show_entries",
        "format=duration",
        "-of",
        "default=noprint_wrappers=1:nokey=1",
        str(audio_path),
    ]
    try:
        result = run_command(cmd)
    except subprocess.CalledProcessError as exc:
        raise ProbeFailure("ffprobe failed", path=audio_path, detail=exc.stderr) from exc
    except OSError as exc:
        raise ProbeFailure(f"Could not run {ffprobe_bin}", path=audio_path, detail=str(exc)) from exc

    raw = result.stdout.strip()
    try:
        seconds = float(raw)
    except ValueError as exc:
        raise ProbeFailure(f"Non-numeric duration {raw!r}", path=audio_path, detail=result.stderr) from exc
    if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        raise ProbeFailure(f"Invalid duration {raw!r}", path=audio_path)
    # 4.35 * 1000 == 4349.999..., round away float noise before flooring
    return int(math.floor(round(seconds * 1000, 6)))
