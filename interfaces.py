"""Protocol interfaces used by JobOrchestrator."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Protocol, Sequence

from models import AppConfig, CopyResult, SolutionResult


class ScreenshotProvider(Protocol):
    def capture(self) -> bytes: ...


class AudioRecorder(Protocol):
    @property
    def is_recording(self) -> bool: ...

    def start(self, device_id: str = "default") -> None: ...

    def stop(self) -> Path: ...


class AIProviderAdapter(Protocol):
    def solve_from_images(
        self,
        images: Sequence[bytes],
        language: str,
        interview_type: str,
    ) -> SolutionResult: ...

    def stream_from_audio(
        self,
        audio: bytes,
        mime_type: str,
        language: str,
    ) -> Iterator[str]: ...

    def answer_from_audio(self, audio: bytes, mime_type: str, language: str) -> str: ...


class ConfigStore(Protocol):
    def load(self) -> Optional[AppConfig]: ...

    def save(self, config: AppConfig) -> None: ...


class ClipboardService(Protocol):
    def copy_text(self, text: str) -> CopyResult: ...
