"""In-memory, newest-first store of completed jobs."""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional, Sequence, Tuple, Union

from models import HistoryEntry, HistoryKind, ScreenshotArtifact, SolutionResult


def now_ms() -> int:
    return int(time.time() * 1000)


class HistoryStore:
    def __init__(self, clock: Callable[[], int] = now_ms) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: list[HistoryEntry] = []
        self._next_id = 1

    def add_solution(
        self,
        result: SolutionResult,
        screenshots: Sequence[ScreenshotArtifact] = (),
    ) -> HistoryEntry:
        return self._add(HistoryKind.SCREENSHOT, result, tuple(screenshots))

    def add_transcript(self, text: str) -> HistoryEntry:
        return self._add(HistoryKind.AUDIO, text, ())

    def entries(self) -> list[HistoryEntry]:
        with self._lock:
            return list(self._entries)

    def latest(self) -> Optional[HistoryEntry]:
        with self._lock:
            return self._entries[0] if self._entries else None

    def get(self, entry_id: int) -> Optional[HistoryEntry]:
        with self._lock:
            return next((e for e in self._entries if e.id == entry_id), None)

    def clear(self) -> None:
        with self._lock:
            self._entries = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _add(
        self,
        kind: HistoryKind,
        payload: Union[SolutionResult, str],
        artifacts: Tuple[ScreenshotArtifact, ...],
    ) -> HistoryEntry:
        with self._lock:
            entry = HistoryEntry(
                id=self._next_id,
                kind=kind,
                created_at=self._clock(),
                payload=payload,
                source_artifacts=artifacts,
            )
            self._next_id += 1
            self._entries.insert(0, entry)
            return entry
