from __future__ import annotations

from pathlib import Path
from typing import Iterator

from errors import ProviderError
from history import HistoryStore
from models import AppConfig, AppEvent, AudioArtifact, EventKind, HistoryKind
from openai_adapter import OpenAIAdapter
from audio_pipeline import AudioPipeline


class FakeAudioAdapter:
    def __init__(self, chunks=(), fallback: str = "", stream_error=None) -> None:  # noqa: ANN001
        self.chunks = chunks
        self.fallback = fallback
        self.stream_error = stream_error
        self.stream_calls = 0
        self.fallback_calls = 0
        self.seen: list[tuple[bytes, str, str]] = []

    def stream_from_audio(self, audio: bytes, mime_type: str, language: str) -> Iterator[str]:
        self.stream_calls += 1
        self.seen.append((audio, mime_type, language))
        if self.stream_error is not None:
            raise self.stream_error
        yield from self.chunks

    def answer_from_audio(self, audio: bytes, mime_type: str, language: str) -> str:
        self.fallback_calls += 1
        return self.fallback

    def solve_from_images(self, images, language, interview_type):  # noqa: ANN001
        raise AssertionError("not used")


def _artifact(tmp_path: Path) -> AudioArtifact:
    path = tmp_path / "question-1.wav"
    path.write_bytes(b"RIFF-data")
    return AudioArtifact(file_path=path)


def _pipeline() -> tuple[AudioPipeline, HistoryStore, list[AppEvent]]:
    events: list[AppEvent] = []
    history = HistoryStore(clock=lambda: 1)
    return AudioPipeline(history, events.append), history, events


def _config() -> AppConfig:
    return AppConfig(provider="gemini", gemini_api_key="k", model="gemini-2.5-flash", language="Go")


def test_streamed_chunks_are_forwarded_in_order(tmp_path: Path) -> None:
    pipeline, history, events = _pipeline()
    adapter = FakeAudioAdapter(chunks=("Hello ", "", "world", "!"))

    entry = pipeline.run(_artifact(tmp_path), adapter, _config())

    assert [e.kind for e in events] == [
        EventKind.AUDIO_PROCESSING_STARTED,
        EventKind.AUDIO_STREAM_CHUNK,
        EventKind.AUDIO_STREAM_CHUNK,
        EventKind.AUDIO_STREAM_CHUNK,
        EventKind.AUDIO_PROCESSING_COMPLETE,
    ]
    assert events[-1].text == "Hello world!"
    assert entry is not None and entry.kind == HistoryKind.AUDIO
    assert history.latest() is entry
    assert adapter.seen == [(b"RIFF-data", "audio/wav", "Go")]
    assert adapter.fallback_calls == 0


def test_empty_stream_falls_back_once(tmp_path: Path) -> None:
    pipeline, history, events = _pipeline()
    adapter = FakeAudioAdapter(chunks=(), fallback="Use a hash map.")

    entry = pipeline.run(_artifact(tmp_path), adapter, _config())

    assert adapter.stream_calls == 1
    assert adapter.fallback_calls == 1
    chunks = [e.text for e in events if e.kind == EventKind.AUDIO_STREAM_CHUNK]
    assert chunks == ["Use a hash map."]
    assert entry is not None and entry.payload == "Use a hash map."


def test_blank_answer_creates_no_history_entry(tmp_path: Path) -> None:
    pipeline, history, events = _pipeline()
    adapter = FakeAudioAdapter(chunks=(), fallback="")

    assert pipeline.run(_artifact(tmp_path), adapter, _config()) is None

    assert len(history) == 0
    assert events[-1].kind == EventKind.AUDIO_PROCESSING_COMPLETE
    assert events[-1].text == ""
    assert events[-1].entry is None


def test_stream_error_ends_job_without_retry(tmp_path: Path) -> None:
    pipeline, history, events = _pipeline()
    adapter = FakeAudioAdapter(stream_error=ProviderError("Gemini streaming failed: boom"))

    assert pipeline.run(_artifact(tmp_path), adapter, _config()) is None

    assert adapter.stream_calls == 1
    assert adapter.fallback_calls == 0
    assert events[-1].kind == EventKind.AUDIO_PROCESSING_ERROR
    assert "boom" in events[-1].message
    assert len(history) == 0


def test_missing_config_reports_error(tmp_path: Path) -> None:
    pipeline, _, events = _pipeline()

    pipeline.run(_artifact(tmp_path), None, None)

    assert events[-1].kind == EventKind.AUDIO_PROCESSING_ERROR
    assert "No configuration" in events[-1].message


def test_openai_provider_reports_unsupported(tmp_path: Path) -> None:
    pipeline, _, events = _pipeline()
    adapter = OpenAIAdapter("sk-test", client=object())
    config = AppConfig(provider="openai", openai_api_key="sk-test")

    pipeline.run(_artifact(tmp_path), adapter, config)

    assert events[-1].kind == EventKind.AUDIO_PROCESSING_ERROR
    assert events[-1].message == "Audio processing is currently only supported with Gemini provider"


def test_stale_job_emits_nothing_after_reset(tmp_path: Path) -> None:
    pipeline, history, events = _pipeline()
    adapter = FakeAudioAdapter(chunks=("a", "b"))

    pipeline.run(_artifact(tmp_path), adapter, _config(), is_current=lambda: False)

    assert [e.kind for e in events] == [EventKind.AUDIO_PROCESSING_STARTED]
    assert len(history) == 0
