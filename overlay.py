"""Overlay window showing the screenshot queue, solutions and audio answers."""

from __future__ import annotations

from html import escape
from typing import Optional

from models import HistoryEntry, HistoryKind, ScreenshotArtifact, SolutionResult

try:
    from PySide6.QtCore import Qt, QTimer
    from PySide6.QtGui import QPixmap
    from PySide6.QtWidgets import (
        QApplication,
        QHBoxLayout,
        QLabel,
        QListWidget,
        QListWidgetItem,
        QPlainTextEdit,
        QPushButton,
        QTextBrowser,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QTimer = None  # type: ignore
    QWidget = object  # type: ignore

ERROR_BANNER_MS = 5000
HISTORY_VISIBLE = 5
THUMB_WIDTH = 120

_PANEL_STYLE = "color: white; background: rgba(0,0,0,190); border-radius: 10px; padding: 8px;"
_ERROR_STYLE = "color: #FF6B6B; background: rgba(40,0,0,210); border-radius: 8px; padding: 6px;"


def solution_html(result: SolutionResult) -> str:
    return (
        f"<h4>Approach</h4><p>{escape(result.approach)}</p>"
        f"<h4>Solution</h4><pre>{escape(result.code)}</pre>"
        f"<h4>Complexity</h4><p>Time: {escape(result.time_complexity)}<br>"
        f"Space: {escape(result.space_complexity)}</p>"
    )


class OverlayWindow(QWidget):
    def __init__(self) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowFlags(
            Qt.WindowStaysOnTopHint | Qt.FramelessWindowHint | Qt.Tool
        )
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.resize(800, 600)

        self._status = QLabel("Ctrl+H screenshot · Ctrl+Enter solve · Ctrl+M record · Ctrl+R reset")
        self._status.setStyleSheet(_PANEL_STYLE)

        self._error = QLabel("")
        self._error.setWordWrap(True)
        self._error.setStyleSheet(_ERROR_STYLE)
        self._error_close = QPushButton("×")
        self._error_close.setFixedWidth(28)
        self._error_close.clicked.connect(self.clear_error)
        error_row = QHBoxLayout()
        error_row.addWidget(self._error, 1)
        error_row.addWidget(self._error_close)
        self._error_box = QWidget()
        self._error_box.setLayout(error_row)
        self._error_box.hide()

        self._thumbs = QHBoxLayout()
        self._thumbs.addStretch(1)
        thumbs_box = QWidget()
        thumbs_box.setLayout(self._thumbs)

        self._solution = QTextBrowser()
        self._solution.setStyleSheet(_PANEL_STYLE)

        self._stream = QPlainTextEdit()
        self._stream.setReadOnly(True)
        self._stream.setStyleSheet(_PANEL_STYLE)
        self._stream.hide()

        self._history = QListWidget()
        self._history.setStyleSheet(_PANEL_STYLE)
        self._history.setMaximumHeight(120)
        self._history.itemClicked.connect(self._on_history_clicked)
        self._entries: list[HistoryEntry] = []
        self._current: Optional[HistoryEntry] = None

        layout = QVBoxLayout()
        layout.setContentsMargins(8, 8, 8, 8)
        layout.addWidget(self._status)
        layout.addWidget(self._error_box)
        layout.addWidget(thumbs_box)
        layout.addWidget(self._solution, 3)
        layout.addWidget(self._stream, 3)
        layout.addWidget(self._history, 1)
        self.setLayout(layout)

        self._error_timer = QTimer(self)
        self._error_timer.setSingleShot(True)
        self._error_timer.timeout.connect(self.clear_error)

    @property
    def current_entry(self) -> Optional[HistoryEntry]:
        return self._current

    # ------------------------------------------------------------------
    # Screenshot queue
    # ------------------------------------------------------------------

    def add_screenshot(self, screenshot: ScreenshotArtifact) -> None:
        pixmap = QPixmap()
        pixmap.loadFromData(screenshot.image_bytes, "PNG")
        thumb = QLabel()
        thumb.setPixmap(pixmap.scaledToWidth(THUMB_WIDTH, Qt.SmoothTransformation))
        thumb.setToolTip(str(screenshot.source_path))
        self._thumbs.insertWidget(self._thumbs.count() - 1, thumb)

    def clear_screenshots(self) -> None:
        while self._thumbs.count() > 1:
            item = self._thumbs.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def set_status(self, text: str) -> None:
        self._status.setText(text)

    def set_processing(self, busy: bool) -> None:
        if busy:
            self._current = None
            self._solution.setHtml("<p><i>Solving…</i></p>")
            self.set_status("🤔 Processing screenshots...")

    def show_result(self, result: SolutionResult) -> None:
        self._stream.hide()
        self._solution.show()
        self._solution.setHtml(solution_html(result))

    def show_entry(self, entry: HistoryEntry) -> None:
        self._current = entry
        if isinstance(entry.payload, SolutionResult):
            self.show_result(entry.payload)
        else:
            self._stream.hide()
            self._solution.show()
            self._solution.setPlainText(entry.payload)

    def start_stream(self) -> None:
        self._current = None
        self._stream.clear()
        self._solution.hide()
        self._stream.show()
        self.set_status("🎧 Answering recorded question...")

    def append_stream(self, chunk: str) -> None:
        cursor = self._stream.textCursor()
        cursor.movePosition(cursor.MoveOperation.End)
        cursor.insertText(chunk)
        self._stream.setTextCursor(cursor)
        self._stream.ensureCursorVisible()

    def clear_stream(self) -> None:
        self._stream.clear()
        self._stream.hide()
        self._solution.show()

    def set_recording(self, recording: bool) -> None:
        self.set_status("🎙️ Recording... press Ctrl+M to stop" if recording else "✅ Ready")

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def set_history(self, entries: list[HistoryEntry]) -> None:
        self._entries = list(entries)
        self._history.clear()
        for entry in self._entries[:HISTORY_VISIBLE]:
            label = "📸 Screenshot" if entry.kind == HistoryKind.SCREENSHOT else "🎙️ Audio"
            item = QListWidgetItem(f"#{entry.id} {label}")
            item.setData(Qt.UserRole, entry.id)
            self._history.addItem(item)
        if not self._entries:
            self._current = None
            self._solution.clear()

    def _on_history_clicked(self, item: "QListWidgetItem") -> None:
        entry_id = item.data(Qt.UserRole)
        entry = next((e for e in self._entries if e.id == entry_id), None)
        if entry is not None:
            self.show_entry(entry)

    # ------------------------------------------------------------------
    # Errors and window placement
    # ------------------------------------------------------------------

    def show_error(self, text: str, hide_after_ms: int = ERROR_BANNER_MS) -> None:
        """Show an error banner that auto-hides after given ms."""
        self._error.setText(f"⚠️ {text}")
        self._error_box.show()
        self._error_timer.start(hide_after_ms)

    def clear_error(self) -> None:
        self._error_timer.stop()
        self._error.setText("")
        self._error_box.hide()

    def move_by(self, dx: int, dy: int) -> None:
        pos = self.pos()
        self.move(pos.x() + dx, pos.y() + dy)

    def toggle_visibility(self) -> None:
        self.setVisible(not self.isVisible())

    def center_top(self) -> None:
        """Position the window at the top center of the primary screen."""
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geom = screen.availableGeometry()
        x = geom.x() + (geom.width() - self.width()) // 2
        y = geom.y() + 40
        self.move(x, y)
