from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import openai
import requests
from openai import OpenAI

from .config import TTSConfig
from .errors import SynthesisFailure, TextToVideoError
from .ffmpeg_utils import run_command
from .types import AudioSegment, TextSegment

logger = logging.getLogger(__name__)

DurationProbe = Callable[[Path], int]


class BaseTTS:
    """Turns text into an audio file; subclasses talk to a specific engine."""

    name = "base"

    def __init__(self, config: TTSConfig):
        self.config = config

    def synthesize(self, text: str, output_path: Path) -> None:
        raise NotImplementedError

    def segment_filename(self, idx: int) -> str:
        return f"segment_{idx:04d}.{self.config.format}"

    def synthesize_segments(
        self,
        segments: Iterable[TextSegment],
        output_dir: Path,
        measure_duration: DurationProbe,
    ) -> List[AudioSegment]:
        """Synthesize and measure each segment in reading order, one at a time.

        The first failure aborts the loop; files written for earlier segments
        stay on disk.
        """

        output_dir.mkdir(parents=True, exist_ok=True)
        results: List[AudioSegment] = []
        for idx, segment in enumerate(segments, start=1):
            filename = output_dir / self.segment_filename(idx)
            try:
                self.synthesize(segment.text, filename)
                self._check_artifact(filename)
                duration_ms = measure_duration(filename)
            except TextToVideoError as exc:
                if exc.segment_index is None:
                    exc.segment_index = idx
                raise
            segment.duration_ms = duration_ms
            results.append(AudioSegment(text=segment.text, audio_path=filename, duration_ms=duration_ms))
            logger.debug("Segment %04d: %s ms -> %s", idx, duration_ms, filename)
            if idx == 1 or idx % 10 == 0:
                logger.info("TTS progress (%s): %s segments synthesized", self.name, idx)
        return results

    def _check_artifact(self, output_path: Path) -> None:
        if not output_path.exists() or output_path.stat().st_size == 0:
            raise SynthesisFailure(f"{self.name} TTS produced no audio", path=output_path)


class CoquiTTS(BaseTTS):
    """Run the Coqui ``tts`` command line for every segment."""

    name = "coqui"

    def build_command(self, text: str, output_path: Path) -> List[str]:
        cmd = [self.config.tts_bin, "--text", text, "--out_path", str(output_path)]
        if self.config.model:
            cmd.extend(["--model_name", self.config.model])
        return cmd

    def synthesize(self, text: str, output_path: Path) -> None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            run_command(self.build_command(text, output_path), timeout=self.config.timeout)
        except subprocess.CalledProcessError as exc:
            raise SynthesisFailure(
                f"{self.config.tts_bin} exited with status {exc.returncode}",
                path=output_path,
                detail=exc.stderr,
            ) from exc
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise SynthesisFailure(f"Could not run {self.config.tts_bin}", path=output_path, detail=str(exc)) from exc


class CoquiServerTTS(BaseTTS):
    """Use a running Coqui ``tts-server`` over HTTP."""

    name = "coqui-server"

    def __init__(self, config: TTSConfig, session: Optional[requests.Session] = None):
        super().__init__(config)
        self.base_url = (config.api_base or "http://localhost:5002").rstrip("/")
        self.session = session or requests.Session()

    def synthesize(self, text: str, output_path: Path) -> None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        url = f"{self.base_url}/api/tts"
        try:
            response = self.session.get(url, params={"text": text}, timeout=self.config.timeout or 120)
        except requests.RequestException as exc:
            raise SynthesisFailure(f"Request to {url} failed", path=output_path, detail=str(exc)) from exc
        if response.status_code >= 400:
            raise SynthesisFailure(
                f"TTS server returned HTTP {response.status_code}", path=output_path, detail=response.text
            )
        output_path.write_bytes(response.content)


class OpenAITTS(BaseTTS):
    """Use OpenAI's speech models."""

    name = "openai"

    def __init__(self, config: TTSConfig, client: Optional[OpenAI] = None):
        super().__init__(config)
        if client is not None and config.api_base:
            logger.warning("Ignoring provided OpenAI client because custom api_base was supplied.")
            client = None
        kwargs = {}
        if config.api_base:
            kwargs["base_url"] = config.api_base
        if config.api_key_env:
            api_key = os.getenv(config.api_key_env)
            if api_key:
                kwargs["api_key"] = api_key
        if config.timeout:
            kwargs["timeout"] = config.timeout
        self.client = client or OpenAI(**kwargs)

    def synthesize(self, text: str, output_path: Path) -> None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.client.audio.speech.with_streaming_response.create(
                model=self.config.model or "gpt-4o-mini-tts",
                voice=self.config.voice,
                input=text,
                response_format=self.config.format,
                speed=self.config.speaking_rate,
            ) as response:
                response.stream_to_file(output_path)
        except openai.OpenAIError as exc:
            raise SynthesisFailure("OpenAI speech request failed", path=output_path, detail=str(exc)) from exc


class EdgeTTS(BaseTTS):
    """Use Microsoft Edge neural voices without requiring Azure credentials."""

    name = "edge"

    def __init__(self, config: TTSConfig):
        try:
            import edge_tts  # type: ignore
        except ImportError as exc:
            raise RuntimeError("edge-tts package is required for Edge TTS provider.") from exc
        super().__init__(config)
        self.edge_tts = edge_tts

    def synthesize(self, text: str, output_path: Path) -> None:
        try:
            self._run_async(self._synthesize_to_file(text, output_path))
        except Exception as exc:  # edge-tts raises a mix of aiohttp and its own errors
            raise SynthesisFailure("Edge TTS request failed", path=output_path, detail=str(exc)) from exc

    async def _synthesize_to_file(self, text: str, output_path: Path) -> None:
        communicate = self.edge_tts.Communicate(
            text=text,
            voice=self.config.edge_voice,
            rate=self.config.edge_rate,
            volume=self.config.edge_volume,
        )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as outfile:
            async for chunk in communicate.stream():
                if chunk["type"] == "audio":
                    outfile.write(chunk["data"])

    def _run_async(self, coroutine) -> None:
        loop = asyncio.new_event_loop()
        try:
            loop.run_until_complete(coroutine)
        finally:
            loop.close()


def build_tts(config: TTSConfig, client: Optional[OpenAI] = None) -> BaseTTS:
    provider = (config.provider or "coqui").lower()
    if provider == "coqui":
        return CoquiTTS(config=config)
    if provider == "coqui-server":
        return CoquiServerTTS(config=config)
    if provider == "openai":
        return OpenAITTS(config=config, client=client)
    if provider == "edge":
        return EdgeTTS(config=config)
    raise ValueError(f"Unsupported TTS provider: {config.provider}")
