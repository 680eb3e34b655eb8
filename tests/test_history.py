from __future__ import annotations

from pathlib import Path

from history import HistoryStore
from models import HistoryKind, ScreenshotArtifact, SolutionResult


def _result(code: str = "print(1)") -> SolutionResult:
    return SolutionResult(approach="a", code=code, time_complexity="O(1)", space_complexity="O(1)")


def test_entries_are_newest_first_with_increasing_ids() -> None:
    ticks = iter([100, 200])
    store = HistoryStore(clock=lambda: next(ticks))

    first = store.add_solution(_result())
    second = store.add_transcript("spoken answer")

    assert store.entries() == [second, first]
    assert second.id > first.id
    assert store.latest() is second
    assert first.created_at == 100
    assert second.kind == HistoryKind.AUDIO


def test_solution_entry_keeps_screenshots() -> None:
    store = HistoryStore(clock=lambda: 1)
    shots = [ScreenshotArtifact(id=i, image_bytes=b"x", source_path=Path(f"{i}.png")) for i in (1, 2)]

    entry = store.add_solution(_result("code"), shots)

    assert entry.source_artifacts == tuple(shots)
    assert entry.display_text == "code"
    assert store.get(entry.id) is entry
    assert store.get(999) is None


def test_clear_empties_store() -> None:
    store = HistoryStore(clock=lambda: 1)
    store.add_transcript("x")

    store.clear()

    assert len(store) == 0
    assert store.latest() is None
