"""Global hotkey adapter based on pynput."""

from __future__ import annotations

from typing import Callable, Mapping, Optional

try:
    from pynput import keyboard
except Exception:  # pragma: no cover
    keyboard = None  # type: ignore

TAKE_SCREENSHOT = "<ctrl>+h"
PROCESS_QUEUE = "<ctrl>+<enter>"
RESET_ALL = "<ctrl>+r"
TOGGLE_RECORDING = "<ctrl>+m"
TOGGLE_VISIBILITY = "<ctrl>+b"
SHOW_SETTINGS = "<ctrl>+p"
QUIT = "<ctrl>+q"
MOVE_LEFT = "<ctrl>+<left>"
MOVE_RIGHT = "<ctrl>+<right>"
MOVE_UP = "<ctrl>+<up>"
MOVE_DOWN = "<ctrl>+<down>"
COPY_CODE = "<ctrl>+<shift>+c"


class GlobalHotkeyAdapter:
    def __init__(self, bindings: Mapping[str, Callable[[], None]]) -> None:
        self._bindings = dict(bindings)
        self._listener: Optional[object] = None

    @property
    def bindings(self) -> dict[str, Callable[[], None]]:
        return dict(self._bindings)

    def start(self) -> None:
        if keyboard is None:
            raise RuntimeError("pynput is not installed")
        if self._listener is not None:
            return
        self._listener = keyboard.GlobalHotKeys(self._bindings)
        self._listener.start()

    def stop(self) -> None:
        listener = self._listener
        if listener is not None:
            listener.stop()
            self._listener = None
