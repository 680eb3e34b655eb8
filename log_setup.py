"""Root logging configuration for console + per-day file output."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

_FORMAT = "%(asctime)s [%(threadName)s] %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_dir: str | Path | None = None, level: int = logging.INFO) -> Path | None:
    """Configure the root logger once and return the log file path, if any."""
    root = logging.getLogger()
    if getattr(root, "_interview_overlay_configured", False):
        return getattr(root, "_interview_overlay_log_file", None)

    env_level = os.getenv("LOG_LEVEL", "").strip().upper()
    resolved = logging.getLevelName(env_level) if env_level else level
    if isinstance(resolved, int):
        level = resolved
    root.setLevel(level)
    formatter = logging.Formatter(_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    log_file: Path | None = None
    if log_dir is not None:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        log_file = path / f"interview_overlay_{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root._interview_overlay_configured = True  # type: ignore[attr-defined]
    root._interview_overlay_log_file = log_file  # type: ignore[attr-defined]
    return log_file
