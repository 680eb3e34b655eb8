"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

from errors import ConfigInvalid, InvalidState, ProviderError

MAX_SCREENSHOTS = 4


class Provider(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"


class InterviewType(str, Enum):
    ALGORITHMIC = "algorithmic"
    FRONTEND = "frontend"
    JAVA_MICROSERVICES = "java-microservices"


class HistoryKind(str, Enum):
    SCREENSHOT = "screenshot"
    AUDIO = "audio"


class EventKind(str, Enum):
    SCREENSHOT_ADDED = "screenshot-added"
    PROCESSING_STARTED = "processing-started"
    PROCESSING_COMPLETE = "processing-complete"
    QUEUE_RESET = "queue-reset"
    RECORDING_TOGGLED = "recording-toggled"
    RECORDING_ERROR = "recording-error"
    AUDIO_PROCESSING_STARTED = "audio-processing-started"
    AUDIO_STREAM_CHUNK = "audio-stream-chunk"
    AUDIO_PROCESSING_COMPLETE = "audio-processing-complete"
    AUDIO_PROCESSING_ERROR = "audio-processing-error"
    AUDIO_QUEUE_RESET = "audio-queue-reset"


@dataclass(frozen=True)
class ScreenshotArtifact:
    id: int
    image_bytes: bytes = field(repr=False)
    source_path: Path


@dataclass(frozen=True)
class AudioArtifact:
    file_path: Path
    mime_type: str = "audio/wav"


_SOLUTION_FIELDS = ("approach", "code", "timeComplexity", "spaceComplexity")


@dataclass(frozen=True)
class SolutionResult:
    approach: str
    code: str
    time_complexity: str
    space_complexity: str
    error: str = ""

    @property
    def is_error(self) -> bool:
        return bool(self.error)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SolutionResult":
        """Build a result from the provider's JSON object.

        All four fields must be present and non-empty; otherwise the
        response is rejected with ``ProviderError``.
        """
        missing = [
            name
            for name in _SOLUTION_FIELDS
            if not isinstance(data.get(name), str) or not data.get(name, "").strip()
        ]
        if missing:
            raise ProviderError(
                f"Invalid response structure, missing: {', '.join(missing)}"
            )
        return cls(
            approach=data["approach"],
            code=data["code"],
            time_complexity=data["timeComplexity"],
            space_complexity=data["spaceComplexity"],
        )

    @classmethod
    def failed(cls, message: str) -> "SolutionResult":
        return cls(
            approach="Error occurred while processing",
            code=f"Error: {message}",
            time_complexity="N/A",
            space_complexity="N/A",
            error=message,
        )

    @classmethod
    def cancelled(cls) -> "SolutionResult":
        return cls(
            approach="Processing cancelled",
            code="",
            time_complexity="",
            space_complexity="",
            error="cancelled",
        )

    def to_dict(self) -> dict[str, str]:
        data = {
            "approach": self.approach,
            "code": self.code,
            "timeComplexity": self.time_complexity,
            "spaceComplexity": self.space_complexity,
        }
        if self.error:
            data["error"] = self.error
        return data


class StreamingTranscript:
    """Append-only text accumulator for one in-flight audio job."""

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def chunk_count(self) -> int:
        return len(self._chunks)

    def append(self, chunk: str) -> None:
        if self._frozen:
            raise InvalidState("Transcript is already finalized")
        self._chunks.append(chunk)

    def text(self) -> str:
        return "".join(self._chunks)

    def freeze(self) -> str:
        self._frozen = True
        return self.text()


@dataclass(frozen=True)
class HistoryEntry:
    id: int
    kind: HistoryKind
    created_at: int
    payload: Union[SolutionResult, str]
    source_artifacts: Tuple[ScreenshotArtifact, ...] = ()

    @property
    def display_text(self) -> str:
        """Text copied to the clipboard for this entry."""
        if isinstance(self.payload, SolutionResult):
            return self.payload.code
        return self.payload


@dataclass
class AppConfig:
    provider: str = Provider.OPENAI.value
    openai_api_key: str = ""
    gemini_api_key: str = ""
    language: str = "Python"
    model: str = "gpt-3.5-turbo"
    audio_device_id: str = "default"
    interview_type: str = InterviewType.ALGORITHMIC.value

    @property
    def api_key(self) -> str:
        if self.provider == Provider.OPENAI.value:
            return self.openai_api_key
        if self.provider == Provider.GEMINI.value:
            return self.gemini_api_key
        raise ConfigInvalid(f"Unsupported AI provider: {self.provider}")

    def to_dict(self) -> dict[str, str]:
        return {
            "provider": self.provider,
            "openaiApiKey": self.openai_api_key,
            "geminiApiKey": self.gemini_api_key,
            "language": self.language,
            "model": self.model,
            "audioDeviceId": self.audio_device_id,
            "interviewType": self.interview_type,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppConfig":
        return cls(
            provider=str(data.get("provider") or ""),
            openai_api_key=str(data.get("openaiApiKey") or ""),
            gemini_api_key=str(data.get("geminiApiKey") or ""),
            language=str(data.get("language") or ""),
            model=str(data.get("model") or ""),
            audio_device_id=str(data.get("audioDeviceId") or "default"),
            interview_type=str(data.get("interviewType") or InterviewType.ALGORITHMIC.value),
        )


@dataclass
class AppEvent:
    kind: EventKind
    result: Optional[SolutionResult] = None
    screenshot: Optional[ScreenshotArtifact] = None
    entry: Optional[HistoryEntry] = None
    text: str = ""
    message: str = ""
    recording: bool = False
    file_path: Optional[Path] = None


@dataclass
class CopyResult:
    success: bool
    reason: str
