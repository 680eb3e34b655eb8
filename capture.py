"""Screenshot capture with mss, falling back to OS command-line tools."""

from __future__ import annotations

import io
import logging
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Callable, Sequence

import mss
from mss.exception import ScreenShotError
from PIL import Image

from errors import CapabilityUnavailable

logger = logging.getLogger(__name__)

_WINDOWS_SCRIPT = """
Add-Type -AssemblyName System.Windows.Forms
Add-Type -AssemblyName System.Drawing
$screen = [System.Windows.Forms.Screen]::PrimaryScreen
$bitmap = New-Object System.Drawing.Bitmap $screen.Bounds.Width, $screen.Bounds.Height
$graphics = [System.Drawing.Graphics]::FromImage($bitmap)
$graphics.CopyFromScreen($screen.Bounds.X, $screen.Bounds.Y, 0, 0, $bitmap.Size)
$bitmap.Save('{path}')
$graphics.Dispose()
$bitmap.Dispose()
"""


def screenshot_commands(platform: str, target: Path) -> list[list[str]]:
    """Command lines to try, in order, for writing a PNG screenshot to ``target``."""
    path = str(target)
    if platform == "darwin":
        return [["screencapture", "-x", path]]
    if platform.startswith("linux"):
        return [
            ["gnome-screenshot", "-f", path],
            ["scrot", path],
            ["import", "-window", "root", path],
            ["maim", path],
            ["spectacle", "-b", "-n", "-o", path],
        ]
    if platform == "win32":
        return [["powershell", "-command", _WINDOWS_SCRIPT.format(path=path.replace("'", "''"))]]
    return []


def grab_primary_monitor() -> bytes:
    """Capture the main monitor and return PNG bytes."""
    with mss.mss() as sct:
        # monitors[0] is the union of all screens, monitors[1] the main one
        shot = sct.grab(sct.monitors[1])
        img = Image.frombytes("RGB", shot.size, shot.bgra, "raw", "BGRX")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class ScreenshotCapture:
    def __init__(
        self,
        platform: str = sys.platform,
        grabber: Callable[[], bytes] = grab_primary_monitor,
        run: Callable[..., object] = subprocess.run,
    ) -> None:
        self._platform = platform
        self._grabber = grabber
        self._run = run

    def capture(self) -> bytes:
        try:
            return self._grabber()
        except ScreenShotError as exc:
            logger.warning("mss capture failed (%s), trying command-line tools", exc)
        return self._capture_with_tools()

    def _capture_with_tools(self) -> bytes:
        with tempfile.TemporaryDirectory(prefix="interview_overlay_") as tmp:
            target = Path(tmp) / "capture.png"
            commands = screenshot_commands(self._platform, target)
            for command in commands:
                if self._try_command(command, target):
                    return target.read_bytes()
        tools = ", ".join(cmd[0] for cmd in commands) or "none"
        raise CapabilityUnavailable(
            f"No screenshot tool available on {self._platform} (tried: {tools})"
        )

    def _try_command(self, command: Sequence[str], target: Path) -> bool:
        try:
            self._run(list(command), check=True, capture_output=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.debug("Screenshot tool %s unavailable: %s", command[0], exc)
            return False
        return target.exists() and target.stat().st_size > 0
