"""Turn a finished recording into a streamed answer and a history entry."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from errors import ConfigInvalid, user_message
from history import HistoryStore
from interfaces import AIProviderAdapter
from models import AppConfig, AppEvent, AudioArtifact, EventKind, HistoryEntry, StreamingTranscript

logger = logging.getLogger(__name__)

EventCallback = Callable[[AppEvent], None]


class AudioPipeline:
    def __init__(self, history: HistoryStore, emit: EventCallback) -> None:
        self._history = history
        self._emit = emit

    def run(
        self,
        artifact: AudioArtifact,
        adapter: Optional[AIProviderAdapter],
        config: Optional[AppConfig],
        is_current: Callable[[], bool] = lambda: True,
    ) -> Optional[HistoryEntry]:
        """Process one recording; never raises.

        Chunks are forwarded as they arrive. If the stream produces no
        text at all, one non-streaming request is made and its answer is
        delivered as a single chunk. Failures end the job with an
        ``audio-processing-error`` event and no retry.
        """
        transcript = StreamingTranscript()
        self._emit(AppEvent(kind=EventKind.AUDIO_PROCESSING_STARTED, file_path=artifact.file_path))
        try:
            if config is None or adapter is None:
                raise ConfigInvalid("No configuration found")
            audio = artifact.file_path.read_bytes()
            logger.info("Processing audio %s (%d bytes)", artifact.file_path, len(audio))

            for chunk in adapter.stream_from_audio(audio, artifact.mime_type, config.language):
                if chunk:
                    self._deliver(transcript, chunk, is_current)

            if transcript.chunk_count == 0:
                logger.info("No streamed content received, using non-streaming fallback")
                text = adapter.answer_from_audio(audio, artifact.mime_type, config.language)
                if text:
                    self._deliver(transcript, text, is_current)
        except Exception as exc:
            logger.exception("Error processing audio %s", artifact.file_path)
            if is_current():
                self._emit(AppEvent(kind=EventKind.AUDIO_PROCESSING_ERROR, message=user_message(exc)))
            return None

        final_text = transcript.freeze()
        if not is_current():
            logger.info("Audio job for %s was reset, discarding result", artifact.file_path)
            return None

        entry = self._history.add_transcript(final_text) if final_text.strip() else None
        self._emit(
            AppEvent(
                kind=EventKind.AUDIO_PROCESSING_COMPLETE,
                text=final_text,
                entry=entry,
                file_path=artifact.file_path,
            )
        )
        return entry

    def _deliver(self, transcript: StreamingTranscript, chunk: str, is_current: Callable[[], bool]) -> None:
        transcript.append(chunk)
        if is_current():
            self._emit(AppEvent(kind=EventKind.AUDIO_STREAM_CHUNK, text=chunk))
