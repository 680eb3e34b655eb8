"""Microphone recorder driving an external recording tool."""

from __future__ import annotations

import logging
import shutil
import signal
import subprocess
import sys
import threading
from pathlib import Path
from typing import Any, Callable, Optional

from errors import CapabilityUnavailable, InvalidState, RecordingFailed

try:
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore

logger = logging.getLogger(__name__)

RECORDING_TOOLS = ("arecord", "sox", "ffmpeg")
DEFAULT_DEVICE = "default"
STOP_TIMEOUT_S = 5.0


def _drain_stderr(stream: Any, tool: str) -> None:
    """Keep reading the tool's stderr so a full pipe never blocks the recording."""
    try:
        for data in iter(lambda: stream.read1(4096), b""):
            logger.debug("%s: %s", tool, data.decode("utf-8", errors="ignore").strip())
    except (OSError, ValueError) as exc:
        logger.debug("Stopped reading %s stderr: %s", tool, exc)
    finally:
        stream.close()


def list_input_devices() -> list[tuple[str, str]]:
    """Return ``(device_id, label)`` pairs for microphones, default first."""
    devices = [(DEFAULT_DEVICE, "Default Audio Input")]
    if sd is None:
        return devices
    try:
        for index, info in enumerate(sd.query_devices()):
            if info.get("max_input_channels", 0) > 0:
                devices.append((str(info.get("name", index)), str(info.get("name", f"Input {index}"))))
    except Exception as exc:
        logger.warning("Could not enumerate audio devices: %s", exc)
    return devices


class SubprocessAudioRecorder:
    def __init__(
        self,
        output_dir: Path,
        sample_rate: int = 16000,
        channels: int = 1,
        which: Callable[[str], Optional[str]] = shutil.which,
        popen: Callable[..., Any] = subprocess.Popen,
        platform: str = sys.platform,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.sample_rate = sample_rate
        self.channels = channels
        self._which = which
        self._popen = popen
        self._platform = platform
        self._lock = threading.Lock()
        self._process: Any = None
        self._stderr_reader: Optional[threading.Thread] = None
        self._output_path: Optional[Path] = None
        self._question_counter = 1

    @property
    def is_recording(self) -> bool:
        return self._process is not None

    @property
    def question_counter(self) -> int:
        return self._question_counter

    def find_tool(self) -> str:
        for tool in RECORDING_TOOLS:
            if self._which(tool):
                return tool
        raise CapabilityUnavailable(
            "No audio recording tool found. Please install arecord, sox, or ffmpeg."
        )

    def start(self, device_id: str = DEFAULT_DEVICE) -> None:
        with self._lock:
            if self._process is not None:
                raise InvalidState("Already recording")
            tool = self.find_tool()
            self.output_dir.mkdir(parents=True, exist_ok=True)
            output_path = self.output_dir / f"question-{self._question_counter}.wav"
            if output_path.exists():
                output_path.unlink()
            command = self._build_command(tool, device_id or DEFAULT_DEVICE, output_path)
            try:
                self._process = self._popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.PIPE,
                )
            except OSError as exc:
                raise CapabilityUnavailable(f"Failed to start recording with {tool}: {exc}") from exc
            self._stderr_reader = threading.Thread(
                target=_drain_stderr,
                args=(self._process.stderr, tool),
                name="recorder-stderr",
                daemon=True,
            )
            self._stderr_reader.start()
            self._output_path = output_path
            logger.info("Started recording with %s to: %s", tool, output_path)

    def stop(self) -> Path:
        with self._lock:
            process = self._process
            output_path = self._output_path
            if process is None or output_path is None:
                raise InvalidState("Not currently recording")
            reader = self._stderr_reader
            self._process = None
            self._stderr_reader = None
            self._output_path = None

            if self._platform == "win32":
                process.terminate()
            else:
                process.send_signal(signal.SIGINT)
            try:
                process.wait(timeout=STOP_TIMEOUT_S)
            except subprocess.TimeoutExpired:
                logger.warning("Recording tool did not exit after %.0fs, killing it", STOP_TIMEOUT_S)
                process.kill()
                process.wait()
            if reader is not None:
                reader.join(timeout=1.0)

            if not output_path.exists():
                raise RecordingFailed(f"Recording file was not created: {output_path}")
            if output_path.stat().st_size == 0:
                raise RecordingFailed(f"Recording file is empty: {output_path}")

            self._question_counter += 1
            logger.info("Recording saved to: %s", output_path)
            return output_path

    def _build_command(self, tool: str, device_id: str, output_path: Path) -> list[str]:
        rate = str(self.sample_rate)
        channels = str(self.channels)
        if tool == "arecord":
            command = ["arecord", "-f", "S16_LE", "-t", "wav", "-c", channels, "-r", rate]
            if device_id != DEFAULT_DEVICE:
                command += ["-D", device_id]
            return command + [str(output_path)]
        if tool == "sox":
            source = ["-d"] if device_id == DEFAULT_DEVICE else ["-t", self._sox_driver(), device_id]
            return ["sox", *source, "-t", "wav", "-c", channels, "-r", rate, str(output_path)]
        return [
            "ffmpeg", "-y",
            *self._ffmpeg_input(device_id),
            "-ac", channels,
            "-ar", rate,
            "-acodec", "pcm_s16le",
            str(output_path),
        ]

    def _sox_driver(self) -> str:
        if self._platform == "darwin":
            return "coreaudio"
        if self._platform == "win32":
            return "waveaudio"
        return "alsa"

    def _ffmpeg_input(self, device_id: str) -> list[str]:
        if self._platform == "darwin":
            device = ":0" if device_id == DEFAULT_DEVICE else f":{device_id}"
            return ["-f", "avfoundation", "-i", device]
        if self._platform == "win32":
            return ["-f", "dshow", "-i", f"audio={device_id}"]
        return ["-f", "pulse", "-i", device_id]
