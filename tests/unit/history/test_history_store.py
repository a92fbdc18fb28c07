"""Unit tests for command-line history."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from exline.history.persistence import (
    FileHistoryPersistence,
    InMemoryHistoryPersistence,
)
from exline.history.store import CommandLineHistory, HistoryStoreError


@pytest.mark.unit
def test_load_populates_from_persistence_once() -> None:
    """Loading reads persisted entries; a second load is refused."""
    # Arrange - persisted entries
    history = CommandLineHistory(InMemoryHistoryPersistence([":1", ":2"]))

    # Act - first load
    history.load()

    # Assert - entries present, second load raises
    assert history.loaded is True
    assert history.get() == [":1", ":2"]
    with pytest.raises(HistoryStoreError):
        history.load()
    assert len(history) == 2


@pytest.mark.unit
def test_entries_added_before_load_follow_persisted_ones() -> None:
    persistence = InMemoryHistoryPersistence(["old"])
    history = CommandLineHistory(persistence)
    history.add("early")
    assert history.entries == []
    assert persistence.entries == ["old"]

    history.load()

    assert history.entries == ["old", "early"]
    assert persistence.entries == ["old", "early"]


@pytest.mark.unit
def test_add_before_load_keeps_file_history(tmp_path: Path) -> None:
    """An early add must not replace history already on disk."""
    # Arrange - file seeded with two entries
    path = tmp_path / "history.json"
    path.write_text(
        json.dumps({"schema_version": 1, "entries": [":old1", ":old2"]}),
        encoding="utf-8",
    )
    history = CommandLineHistory(FileHistoryPersistence(path))

    # Act - add, then load
    history.add(":early")
    history.load()

    # Assert - persisted entries first, early entry once, file matches
    assert history.get() == [":old1", ":old2", ":early"]
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["entries"] == [":old1", ":old2", ":early"]


@pytest.mark.unit
def test_add_keeps_duplicates_and_forwards_to_persistence() -> None:
    persistence = InMemoryHistoryPersistence()
    history = CommandLineHistory(persistence)
    history.load()

    history.add(":w")
    history.add(":w")

    assert history.get() == [":w", ":w"]
    assert persistence.entries == [":w", ":w"]


@pytest.mark.unit
def test_get_returns_copy() -> None:
    history = CommandLineHistory(InMemoryHistoryPersistence(["a"]))
    history.load()

    snapshot = history.get()
    snapshot.append("mutated")

    assert history.get() == ["a"]


@pytest.mark.unit
def test_clear_empties_memory_and_persistence() -> None:
    persistence = InMemoryHistoryPersistence(["a", "b"])
    history = CommandLineHistory(persistence)
    history.load()

    history.clear()

    assert history.get() == []
    assert persistence.entries == []
