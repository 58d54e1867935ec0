import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from text_to_video import PipelineConfig, TextToVideoAgent
from text_to_video.config import (
    BackgroundMusicConfig,
    EncoderConfig,
    SegmenterConfig,
    SubtitleConfig,
    TTSConfig,
    VideoConfig,
)
from text_to_video.errors import TextToVideoError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Turn text into a narrated slideshow video with subtitles.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", type=str, help="Text to narrate.")
    source.add_argument("--text-file", type=Path, help="File containing the text to narrate.")
    parser.add_argument("images", type=str, help="Image sequence pattern, e.g. slides/slide%%d.jpg.")
    parser.add_argument("--run-name", type=str, help="Optional name for this conversion run.")
    parser.add_argument("--output-dir", type=Path, default=Path("output"), help="Directory to store generated artifacts.")
    parser.add_argument("--no-overwrite", action="store_true", help="Refuse to reuse an existing run directory.")
    parser.add_argument("--no-metadata", action="store_true", help="Skip writing text.txt and metadata.json.")
    parser.add_argument("--max-chars", type=int, default=200, help="Maximum characters per spoken segment.")
    parser.add_argument("--min-chars", type=int, default=20, help="Segments shorter than this are merged or padded.")
    parser.add_argument(
        "--tts-provider",
        type=str,
        choices=["coqui", "coqui-server", "openai", "edge"],
        default="coqui",
        help="TTS backend to use.",
    )
    parser.add_argument(
        "--tts-model",
        type=str,
        help="Model name for the TTS provider (default depends on provider).",
    )
    parser.add_argument("--tts-bin", type=str, default="tts", help="Coqui TTS executable.")
    parser.add_argument("--tts-voice", type=str, default="alloy", help="Voice name for OpenAI TTS.")
    parser.add_argument("--tts-format", type=str, default="wav", help="Audio format for synthesized speech (wav/mp3).")
    parser.add_argument("--speaking-rate", type=float, default=1.0, help="Relative speaking rate for OpenAI TTS.")
    parser.add_argument("--tts-api-base", type=str, help="Base URL for the TTS server or API.")
    parser.add_argument("--tts-api-key-env", type=str, help="Environment variable containing the TTS API key.")
    parser.add_argument("--tts-timeout", type=float, help="Timeout in seconds for one synthesis call.")
    parser.add_argument("--edge-voice", type=str, default="en-US-AriaNeural", help="Voice ID for Edge TTS provider.")
    parser.add_argument("--edge-rate", type=str, default="+0%", help="Speech rate adjustment for Edge TTS (e.g., +10%%).")
    parser.add_argument("--edge-volume", type=str, default="+0%", help="Volume adjustment for Edge TTS (e.g., +0%%).")
    parser.add_argument("--ffmpeg", type=str, default="ffmpeg", help="ffmpeg executable.")
    parser.add_argument("--ffprobe", type=str, default="ffprobe", help="ffprobe executable.")
    parser.add_argument("--frame-rate", type=float, default=1, help="Slides per second.")
    parser.add_argument("--resolution", type=str, default="1920x1080", help="Output resolution WIDTHxHEIGHT.")
    parser.add_argument("--codec", type=str, default="libx264", help="Video codec.")
    parser.add_argument("--preset", type=str, default="fast", help="Encoder preset.")
    parser.add_argument("--font", type=str, default="Arial", help="Subtitle font.")
    parser.add_argument("--font-size", type=int, default=24, help="Subtitle font size.")
    parser.add_argument("--font-color", type=str, default="white", help="Subtitle colour (name or #RRGGBB).")
    parser.add_argument("--soft-subtitles", action="store_true", help="Mux subtitles as a track instead of burning them in.")
    parser.add_argument("--music", type=Path, help="Background music file to mix under the narration.")
    parser.add_argument("--music-volume", type=float, default=0.3, help="Volume multiplier for the background music.")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> PipelineConfig:
    tts_format = args.tts_format
    if args.tts_provider == "edge" and tts_format.lower() == "wav":
        tts_format = "mp3"
    tts_model = args.tts_model
    if tts_model is None:
        tts_model = {
            "coqui": "tts_models/en/ljspeech/tacotron2-DDC",
            "openai": "gpt-4o-mini-tts",
        }.get(args.tts_provider)
    tts_api_key_env = args.tts_api_key_env or ("OPENAI_API_KEY" if args.tts_provider == "openai" else None)

    tts = TTSConfig(
        provider=args.tts_provider,
        model=tts_model,
        tts_bin=args.tts_bin,
        format=tts_format,
        voice=args.tts_voice,
        speaking_rate=args.speaking_rate,
        api_base=args.tts_api_base,
        api_key_env=tts_api_key_env,
        edge_voice=args.edge_voice,
        edge_rate=args.edge_rate,
        edge_volume=args.edge_volume,
        timeout=args.tts_timeout,
    )

    return PipelineConfig(
        segmenter=SegmenterConfig(max_chars=args.max_chars, min_chars=args.min_chars),
        tts=tts,
        encoder=EncoderConfig(ffmpeg_bin=args.ffmpeg, ffprobe_bin=args.ffprobe),
        video=VideoConfig(
            frame_rate=args.frame_rate,
            resolution=args.resolution,
            codec=args.codec,
            preset=args.preset,
        ),
        subtitles=SubtitleConfig(
            font=args.font,
            font_size=args.font_size,
            color=args.font_color,
            burn_in=not args.soft_subtitles,
        ),
        background_music=BackgroundMusicConfig(
            enabled=args.music is not None,
            volume=args.music_volume,
            path=args.music,
        ),
        output_root=args.output_dir,
        overwrite=not args.no_overwrite,
        save_metadata=not args.no_metadata,
    )


def main(argv=None) -> int:
    args = parse_args(argv)
    load_dotenv()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    text = args.text if args.text is not None else args.text_file.read_text(encoding="utf-8")
    config = build_config(args)
    agent = TextToVideoAgent(config=config)

    try:
        artifacts = agent.convert(text, args.images, run_name=args.run_name)
    except TextToVideoError as exc:
        logging.error("Conversion failed (%s): %s", type(exc).__name__, exc)
        return 1

    logging.info("Video: %s", artifacts.video_path)
    logging.info("Narration audio: %s", artifacts.combined_audio_path)
    logging.info("Subtitles: %s", artifacts.subtitles_path)
    logging.info("Run directory: %s", artifacts.run_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
