from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterable, List, Tuple

from .config import SubtitleConfig, VideoConfig
from .errors import ComposeFailure
from .ffmpeg_utils import run_command

logger = logging.getLogger(__name__)

# ASS colours are &HAABBGGRR
NAMED_COLOURS = {
    "white": "&H00FFFFFF",
    "black": "&H00000000",
    "yellow": "&H0000FFFF",
    "red": "&H000000FF",
    "green": "&H0000FF00",
    "blue": "&H00FF0000",
}


def parse_resolution(resolution: str) -> Tuple[int, int]:
    try:
        width, height = (int(part) for part in resolution.lower().split("x"))
    except ValueError as exc:
        raise ValueError(f"Resolution must look like 1920x1080, got {resolution!r}") from exc
    if width <= 0 or height <= 0:
        raise ValueError(f"Resolution must be positive, got {resolution!r}")
    return width, height


def ass_colour(color: str) -> str:
    value = color.strip()
    if value.upper().startswith("&H"):
        return value
    if value.startswith("#") and len(value) == 7:
        rr, gg, bb = value[1:3], value[3:5], value[5:7]
        return f"&H00{bb}{gg}{rr}".upper()
    try:
        return NAMED_COLOURS[value.lower()]
    except KeyError:
        raise ValueError(f"Unsupported subtitle colour: {color!r}") from None


def escape_filter_value(value: str) -> str:
    """Escape a value for an ffmpeg filter option inside a filtergraph.

    Filtergraph parsing unescapes once and the filter's option parser
    unescapes again, so option separators need a doubled escape.
    """

    escaped = []
    for ch in value:
        if ch in "\\':=":
            escaped.append("\\\\\\" + ch)
        elif ch in "[],;":
            escaped.append("\\" + ch)
        else:
            escaped.append(ch)
    return "".join(escaped)


def check_compose_settings(video: VideoConfig, subtitles: SubtitleConfig) -> None:
    """Raise ValueError for settings ffmpeg cannot be given, before any work is done."""

    parse_resolution(video.resolution)
    if subtitles.burn_in:
        ass_colour(subtitles.color)


def subtitle_style(config: SubtitleConfig) -> str:
    return ",".join(
        [
            f"FontName={config.font}",
            f"FontSize={config.font_size}",
            f"PrimaryColour={ass_colour(config.color)}",
        ]
    )


def build_compose_command(
    image_pattern: str,
    audio_path: Path,
    subtitles_path: Path,
    output_path: Path,
    video: VideoConfig,
    subtitles: SubtitleConfig,
    ffmpeg_bin: str = "ffmpeg",
) -> List[str]:
    width, height = parse_resolution(video.resolution)
    filters = [f"scale={width}:{height}"]
    cmd = [
        ffmpeg_bin,
        "-y",
        "-framerate",
        str(video.frame_rate),
        "-i",
        str(image_pattern),
        "-i",
        str(audio_path),
    ]
    if subtitles.burn_in:
        filters.append(
            "subtitles=filename={}:force_style={}".format(
                escape_filter_value(Path(subtitles_path).resolve().as_posix()),
                escape_filter_value(subtitle_style(subtitles)),
            )
        )
        cmd.extend(["-map", "0:v", "-map", "1:a"])
    else:
        cmd.extend(["-i", str(subtitles_path), "-map", "0:v", "-map", "1:a", "-map", "2:s", "-c:s", "mov_text"])

    cmd.extend(
        [
            "-vf",
            ",".join(filters),
            "-c:v",
            video.codec,
            "-preset",
            video.preset,
            "-pix_fmt",
            video.pixel_format,
            "-c:a",
            video.audio_codec,
            "-b:a",
            video.audio_bitrate,
        ]
    )
    if video.shortest:
        cmd.append("-shortest")
    cmd.append(str(output_path))
    return cmd


def compose_video(
    image_pattern: str,
    audio_path: Path,
    subtitles_path: Path,
    output_path: Path,
    video: VideoConfig,
    subtitles: SubtitleConfig,
    ffmpeg_bin: str = "ffmpeg",
) -> Path:
    """Render the image sequence with the narration track and subtitles into one video."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        cmd = build_compose_command(
            image_pattern, audio_path, subtitles_path, output_path, video, subtitles, ffmpeg_bin=ffmpeg_bin
        )
    except ValueError as exc:
        raise ComposeFailure("Invalid video settings", path=output_path, detail=str(exc)) from exc
    try:
        run_command(cmd)
    except subprocess.CalledProcessError as exc:
        raise ComposeFailure(
            f"ffmpeg exited with status {exc.returncode}", path=output_path, detail=exc.stderr
        ) from exc
    except OSError as exc:
        raise ComposeFailure(f"Could not run {ffmpeg_bin}", path=output_path, detail=str(exc)) from exc
    logger.info("Video generated: %s", output_path)
    return output_path


def concat_videos(video_paths: Iterable[Path], output_path: Path, ffmpeg_bin: str = "ffmpeg") -> Path:
    """Join finished videos with the concat demuxer, without re-encoding."""

    video_paths = list(video_paths)
    if not video_paths:
        raise ComposeFailure("No videos provided for concatenation.", path=output_path)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    concat_list_file = output_path.parent / "concat_list.txt"
    lines = []
    for file_path in video_paths:
        escaped = str(Path(file_path).resolve()).replace("'", "'\\''")
        lines.append(f"file '{escaped}'")
    concat_list_file.write_text("\n".join(lines) + "\n", encoding="utf-8")

    cmd = [
        ffmpeg_bin,
        "-y",
        "-f",
        "concat",
        "-safe",
        "0",
        "-i",
        str(concat_list_file),
        "-c",
        "copy",
        str(output_path),
    ]
    try:
        run_command(cmd)
    except subprocess.CalledProcessError as exc:
        raise ComposeFailure(
            f"ffmpeg concat exited with status {exc.returncode}", path=output_path, detail=exc.stderr
        ) from exc
    except OSError as exc:
        raise ComposeFailure(f"Could not run {ffmpeg_bin}", path=output_path, detail=str(exc)) from exc
    finally:
        concat_list_file.unlink(missing_ok=True)
    logger.info("Concatenated %s videos into %s", len(video_paths), output_path)
    return output_path
