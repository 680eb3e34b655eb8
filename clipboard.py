"""Clipboard service for copying solution code."""

from __future__ import annotations

import logging

from models import CopyResult

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore

logger = logging.getLogger(__name__)


class PyperclipClipboard:
    def copy_text(self, text: str) -> CopyResult:
        if not text.strip():
            return CopyResult(success=False, reason="nothing to copy")
        if pyperclip is None:
            return CopyResult(success=False, reason="clipboard dependency missing")
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            logger.warning("Clipboard copy failed: %s", exc)
            return CopyResult(success=False, reason=f"clipboard unavailable: {exc}")
        return CopyResult(success=True, reason="ok")
