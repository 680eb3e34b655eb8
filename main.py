"""Application entrypoint."""

from __future__ import annotations

import logging
import sys
import threading
import time
from typing import Callable

from dotenv import load_dotenv

import hotkey as keys
from capture import ScreenshotCapture
from clipboard import PyperclipClipboard
from config import LOG_DIR, RECORDING_DIR, SCREENSHOT_DIR, JsonConfigStore
from errors import InterviewAssistantError
from history import HistoryStore
from hotkey import GlobalHotkeyAdapter
from log_setup import setup_logging
from models import AppEvent, EventKind
from orchestrator import JobOrchestrator
from overlay import OverlayWindow
from recorder import SubprocessAudioRecorder
from settings_dialog import SettingsDialog

try:
    from PySide6.QtCore import QObject, Signal
    from PySide6.QtWidgets import QApplication
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger(__name__)

MOVE_STEP = 50
CAPTURE_HIDE_DELAY_S = 0.1


class UIBridge(QObject):
    event_signal = Signal(object)  # AppEvent
    visibility_signal = Signal(bool)
    action_signal = Signal(object)  # zero-arg callable run on the UI thread


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.overlay = OverlayWindow()
        self.ui = UIBridge()
        self.ui.event_signal.connect(self._on_event_ui)
        self.ui.visibility_signal.connect(self.overlay.setVisible)
        self.ui.action_signal.connect(lambda action: action())
        self.clipboard = PyperclipClipboard()

        self.orchestrator = JobOrchestrator(
            capture=ScreenshotCapture(),
            recorder=SubprocessAudioRecorder(RECORDING_DIR),
            history=HistoryStore(),
            config_store=JsonConfigStore(),
            screenshot_dir=SCREENSHOT_DIR,
            on_event=self.ui.event_signal.emit,
        )
        self.hotkey = GlobalHotkeyAdapter(
            {
                keys.TAKE_SCREENSHOT: self._background(self._take_screenshot),
                keys.PROCESS_QUEUE: self._background(self.orchestrator.process_queue),
                keys.RESET_ALL: self._background(self.orchestrator.reset_all),
                keys.TOGGLE_RECORDING: self._background(self.orchestrator.toggle_recording),
                keys.TOGGLE_VISIBILITY: self._on_ui(self.overlay.toggle_visibility),
                keys.SHOW_SETTINGS: self._on_ui(self._show_settings),
                keys.QUIT: self._on_ui(self.quit),
                keys.MOVE_LEFT: self._on_ui(lambda: self.overlay.move_by(-MOVE_STEP, 0)),
                keys.MOVE_RIGHT: self._on_ui(lambda: self.overlay.move_by(MOVE_STEP, 0)),
                keys.MOVE_UP: self._on_ui(lambda: self.overlay.move_by(0, -MOVE_STEP)),
                keys.MOVE_DOWN: self._on_ui(lambda: self.overlay.move_by(0, MOVE_STEP)),
                keys.COPY_CODE: self._on_ui(self._copy_current),
            }
        )

    # ------------------------------------------------------------------
    # Dispatch helpers (hotkeys fire on the pynput listener thread)
    # ------------------------------------------------------------------

    def _background(self, target: Callable[[], object]) -> Callable[[], None]:
        def run() -> None:
            threading.Thread(target=target, daemon=True).start()

        return run

    def _on_ui(self, action: Callable[[], None]) -> Callable[[], None]:
        return lambda: self.ui.action_signal.emit(action)

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def _take_screenshot(self) -> None:
        was_visible = self.overlay.isVisible()
        self.ui.visibility_signal.emit(False)
        time.sleep(CAPTURE_HIDE_DELAY_S)
        try:
            self.orchestrator.enqueue_screenshot()
        finally:
            if was_visible:
                self.ui.visibility_signal.emit(True)

    def _show_settings(self) -> None:
        dialog = SettingsDialog(self.orchestrator.get_config(), self.overlay)
        if not dialog.exec():
            return
        try:
            self.orchestrator.save_config(dialog.config())
        except InterviewAssistantError as exc:
            self.overlay.show_error(exc.message)
            return
        self.overlay.set_status("✅ Configuration saved")

    def _copy_current(self) -> None:
        entry = self.overlay.current_entry or self.orchestrator.history.latest()
        if entry is None:
            self.overlay.show_error("Nothing to copy yet")
            return
        result = self.clipboard.copy_text(entry.display_text)
        if result.success:
            self.overlay.set_status("📋 Copied to clipboard")
        else:
            self.overlay.show_error(result.reason)

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_event_ui(self, event: AppEvent) -> None:
        kind = event.kind
        if kind == EventKind.SCREENSHOT_ADDED and event.screenshot is not None:
            self.overlay.add_screenshot(event.screenshot)
            count = len(self.orchestrator.screenshots)
            self.overlay.set_status(f"📸 {count} screenshot(s) queued · Ctrl+Enter to solve")
        elif kind == EventKind.PROCESSING_STARTED:
            self.overlay.set_processing(True)
        elif kind == EventKind.PROCESSING_COMPLETE and event.result is not None:
            if event.entry is not None:
                self.overlay.set_history(self.orchestrator.history.entries())
                self.overlay.show_entry(event.entry)
            else:
                self.overlay.show_result(event.result)
            if event.result.is_error and event.result.error != "cancelled":
                self.overlay.show_error(event.result.error)
            self.overlay.set_status("✅ Done")
        elif kind == EventKind.QUEUE_RESET:
            self.overlay.clear_screenshots()
            self.overlay.set_history(self.orchestrator.history.entries())
            self.overlay.set_status("✅ Ready")
        elif kind == EventKind.RECORDING_TOGGLED:
            self.overlay.set_recording(event.recording)
            if event.recording:
                self.overlay.clear_stream()
        elif kind == EventKind.RECORDING_ERROR:
            self.overlay.set_recording(False)
            self.overlay.show_error(event.message)
        elif kind == EventKind.AUDIO_PROCESSING_STARTED:
            self.overlay.start_stream()
        elif kind == EventKind.AUDIO_STREAM_CHUNK:
            self.overlay.append_stream(event.text)
        elif kind == EventKind.AUDIO_PROCESSING_COMPLETE:
            if event.entry is not None:
                self.overlay.set_history(self.orchestrator.history.entries())
                self.overlay.show_entry(event.entry)
            self.overlay.set_status("✅ Done")
        elif kind == EventKind.AUDIO_PROCESSING_ERROR:
            self.overlay.show_error(event.message)
            self.overlay.set_status("❌ Audio processing failed")
        elif kind == EventKind.AUDIO_QUEUE_RESET:
            self.overlay.clear_stream()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        self.overlay.center_top()
        self.overlay.show()
        if self.orchestrator.load_config() is None:
            self._show_settings()
        try:
            self.hotkey.start()
        except Exception as exc:
            logger.error("Global hotkeys unavailable: %s", exc)
            self.overlay.show_error(f"Hotkeys disabled: {exc}")
        return self.app.exec()

    def quit(self) -> None:
        self.hotkey.stop()
        self.orchestrator.shutdown()
        self.app.quit()


def main() -> int:
    load_dotenv()
    setup_logging(LOG_DIR)
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
