"""Screenshot queue and audio job orchestration."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from adapters import create_adapter
from audio_pipeline import AudioPipeline
from config import validate_config
from errors import InterviewAssistantError, InvalidState, user_message
from history import HistoryStore, now_ms
from interfaces import AIProviderAdapter, AudioRecorder, ConfigStore, ScreenshotProvider
from models import (
    MAX_SCREENSHOTS,
    AppConfig,
    AppEvent,
    AudioArtifact,
    EventKind,
    HistoryEntry,
    ScreenshotArtifact,
    SolutionResult,
)

logger = logging.getLogger(__name__)

EventCallback = Callable[[AppEvent], None]
AdapterFactory = Callable[[AppConfig], AIProviderAdapter]

NO_CONFIG_MESSAGE = "No configuration found. Please configure your API keys (Ctrl+P)."


class JobOrchestrator:
    def __init__(
        self,
        capture: ScreenshotProvider,
        recorder: AudioRecorder,
        history: HistoryStore,
        config_store: ConfigStore,
        screenshot_dir: Path,
        adapter_factory: AdapterFactory = create_adapter,
        clock: Callable[[], int] = now_ms,
        on_event: Optional[EventCallback] = None,
        max_screenshots: int = MAX_SCREENSHOTS,
    ) -> None:
        self._capture = capture
        self._recorder = recorder
        self._history = history
        self._config_store = config_store
        self._screenshot_dir = Path(screenshot_dir)
        self._adapter_factory = adapter_factory
        self._clock = clock
        self._on_event = on_event
        self._max_screenshots = max_screenshots

        self._lock = threading.RLock()
        # held across the recorder decision and its start/stop call
        self._toggle_lock = threading.Lock()
        self._queue: list[ScreenshotArtifact] = []
        self._last_screenshot_id = 0
        self._job_seq = 0
        self._processing_job: Optional[int] = None
        self._audio_generation = 0
        self._audio_thread: Optional[threading.Thread] = None
        self._config: Optional[AppConfig] = None
        self._adapter: Optional[AIProviderAdapter] = None
        self._audio_pipeline = AudioPipeline(history, self._emit)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def screenshots(self) -> list[ScreenshotArtifact]:
        with self._lock:
            return list(self._queue)

    @property
    def is_processing(self) -> bool:
        return self._processing_job is not None

    @property
    def is_recording(self) -> bool:
        return self._recorder.is_recording

    @property
    def is_audio_processing(self) -> bool:
        thread = self._audio_thread
        return thread is not None and thread.is_alive()

    @property
    def history(self) -> HistoryStore:
        return self._history

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def load_config(self) -> Optional[AppConfig]:
        config = self._config_store.load()
        if config is None:
            logger.info("No saved configuration")
            return None
        try:
            self._apply_config(config)
        except InterviewAssistantError as exc:
            logger.warning("Loaded configuration is not usable yet: %s", exc)
            with self._lock:
                self._config = config
                self._adapter = None
        return config

    def get_config(self) -> Optional[AppConfig]:
        return self._config

    def save_config(self, config: AppConfig) -> None:
        """Validate, persist and activate a configuration.

        Raises ``ConfigInvalid`` to the caller; nothing is applied then.
        """
        validate_config(config)
        adapter = self._adapter_factory(config)
        self._config_store.save(config)
        with self._lock:
            self._config = config
            self._adapter = adapter
        logger.info("Configuration applied (provider=%s, model=%s)", config.provider, config.model)

    def _apply_config(self, config: AppConfig) -> None:
        validate_config(config)
        adapter = self._adapter_factory(config)
        with self._lock:
            self._config = config
            self._adapter = adapter

    # ------------------------------------------------------------------
    # Screenshots
    # ------------------------------------------------------------------

    def enqueue_screenshot(self) -> Optional[ScreenshotArtifact]:
        with self._lock:
            if len(self._queue) >= self._max_screenshots:
                return None

        try:
            image = self._capture.capture()
        except Exception:
            logger.exception("Error taking screenshot")
            return None

        with self._lock:
            if len(self._queue) >= self._max_screenshots:
                return None
            screenshot_id = max(self._clock(), self._last_screenshot_id + 1)
            self._last_screenshot_id = screenshot_id
            path = self._screenshot_dir / f"{screenshot_id}.png"
            try:
                self._screenshot_dir.mkdir(parents=True, exist_ok=True)
                path.write_bytes(image)
            except OSError:
                logger.exception("Error saving screenshot to %s", path)
                return None
            artifact = ScreenshotArtifact(id=screenshot_id, image_bytes=image, source_path=path)
            self._queue.append(artifact)
            logger.info("Screenshot %d queued (%d/%d)", screenshot_id, len(self._queue), self._max_screenshots)
        self._emit(AppEvent(kind=EventKind.SCREENSHOT_ADDED, screenshot=artifact))
        return artifact

    def process_queue(self) -> Optional[SolutionResult]:
        """Send the queued screenshots to the provider in one request.

        Blocks for the duration of the provider call. Returns the emitted
        result, or None when the call was a no-op or its result was
        discarded by a reset.
        """
        with self._lock:
            if self._processing_job is not None or not self._queue:
                return None
            config, adapter = self._config, self._adapter
            if config is None or adapter is None:
                logger.error("No configuration found")
                result = SolutionResult.failed(NO_CONFIG_MESSAGE)
                self._emit(AppEvent(kind=EventKind.PROCESSING_COMPLETE, result=result))
                return result
            self._job_seq += 1
            job_id = self._job_seq
            self._processing_job = job_id
            screenshots = list(self._queue)

        self._emit(AppEvent(kind=EventKind.PROCESSING_STARTED))
        ok = False
        try:
            result = adapter.solve_from_images(
                [s.image_bytes for s in screenshots],
                config.language,
                config.interview_type,
            )
            ok = True
        except Exception as exc:
            logger.exception("Error processing screenshots")
            result = SolutionResult.failed(user_message(exc))
        finally:
            with self._lock:
                current = self._processing_job == job_id
                if current:
                    self._processing_job = None

        if not current:
            logger.info("Processing job %d was reset, discarding result", job_id)
            return None

        entry: Optional[HistoryEntry] = None
        if ok:
            entry = self._history.add_solution(result, screenshots)
        self._emit(AppEvent(kind=EventKind.PROCESSING_COMPLETE, result=result, entry=entry))
        return result

    def reset_all(self) -> None:
        """Drop queued screenshots, history, any in-flight job and any live recording."""
        with self._lock:
            was_processing = self._processing_job is not None
            self._processing_job = None
            self._audio_generation += 1
            screenshots, self._queue = self._queue, []
            self._history.clear()

        if was_processing:
            self._emit(
                AppEvent(kind=EventKind.PROCESSING_COMPLETE, result=SolutionResult.cancelled())
            )
        if self._discard_recording():
            self._emit(AppEvent(kind=EventKind.RECORDING_TOGGLED, recording=False))
        self._delete_files(screenshots)
        self._emit(AppEvent(kind=EventKind.AUDIO_QUEUE_RESET))
        self._emit(AppEvent(kind=EventKind.QUEUE_RESET))

    def _discard_recording(self) -> bool:
        with self._toggle_lock:
            if not self._recorder.is_recording:
                return False
            try:
                path = self._recorder.stop()
            except InterviewAssistantError as exc:
                logger.warning("Recording discarded with error: %s", exc)
                return True
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.exception("Error deleting recording %s", path)
        return True

    def _delete_files(self, screenshots: list[ScreenshotArtifact]) -> None:
        for screenshot in screenshots:
            try:
                screenshot.source_path.unlink(missing_ok=True)
            except OSError:
                logger.exception("Error deleting screenshot %s", screenshot.source_path)

    # ------------------------------------------------------------------
    # Audio
    # ------------------------------------------------------------------

    def toggle_recording(self) -> Optional[Path]:
        """Start or stop recording; a finished recording is processed in the background.

        Returns the recording path when a recording was stopped.
        """
        with self._toggle_lock:
            try:
                if not self._recorder.is_recording:
                    if self.is_audio_processing:
                        raise InvalidState("Audio processing is still in progress")
                    device_id = self._config.audio_device_id if self._config else "default"
                    self._recorder.start(device_id)
                    self._emit(AppEvent(kind=EventKind.RECORDING_TOGGLED, recording=True))
                    return None
                file_path = self._recorder.stop()
            except InterviewAssistantError as exc:
                logger.error("Error toggling recording: %s", exc)
                self._emit(AppEvent(kind=EventKind.RECORDING_ERROR, message=exc.message))
                return None

            self._emit(AppEvent(kind=EventKind.RECORDING_TOGGLED, recording=False, file_path=file_path))
            self._spawn_audio_job(AudioArtifact(file_path=file_path))
            return file_path

    def reset_audio(self) -> None:
        with self._lock:
            self._audio_generation += 1
        self._emit(AppEvent(kind=EventKind.AUDIO_QUEUE_RESET))

    def wait_for_audio(self, timeout: Optional[float] = None) -> bool:
        """Wait for the background audio job; True when none is running afterwards."""
        thread = self._audio_thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _spawn_audio_job(self, artifact: AudioArtifact) -> None:
        with self._lock:
            generation = self._audio_generation
            config, adapter = self._config, self._adapter

        def is_current() -> bool:
            return self._audio_generation == generation

        thread = threading.Thread(
            target=self._audio_pipeline.run,
            args=(artifact, adapter, config, is_current),
            name="audio-job",
            daemon=True,
        )
        self._audio_thread = thread
        thread.start()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def shutdown(self, audio_timeout: float = 2.0) -> None:
        self._discard_recording()
        with self._lock:
            self._processing_job = None
            self._audio_generation += 1
            screenshots, self._queue = self._queue, []
        self._delete_files(screenshots)
        self.wait_for_audio(audio_timeout)

    def _emit(self, event: AppEvent) -> None:
        if self._on_event:
            self._on_event(event)
