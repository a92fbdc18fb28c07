"""In-memory command-line history."""

from __future__ import annotations

from exline.history.persistence import HistoryPersistence


class HistoryStoreError(RuntimeError):
    """Raised when history lifecycle rules are violated."""


class CommandLineHistory:
    """Append-only, chronological list of submitted command lines."""

    def __init__(self, persistence: HistoryPersistence) -> None:
        """Bind history to its persistence collaborator.

        Args:
            persistence: Backend owning storage and flush policy.
        """
        self._persistence = persistence
        self._entries: list[str] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        """Whether `load()` already ran."""
        return self._loaded

    @property
    def entries(self) -> list[str]:
        """Snapshot of entries; empty before `load()`."""
        if not self._loaded:
            return []
        return self.get()

    def __len__(self) -> int:
        return len(self._entries)

    def load(self) -> None:
        """Populate entries from persistence, once per session.

        Entries added before loading follow the persisted ones and are handed
        to persistence only now.

        Raises:
            HistoryStoreError: If history was already loaded.
        """
        if self._loaded:
            raise HistoryStoreError("Command-line history is already loaded.")
        early = self._entries
        self._entries = self._persistence.load_history()
        self._loaded = True
        for entry in early:
            self._entries.append(entry)
            self._persistence.append_history(entry)

    def add(self, entry: str) -> None:
        """Append entry and hand it to persistence once loaded.

        Args:
            entry: Command line to record.
        """
        self._entries.append(entry)
        if self._loaded:
            self._persistence.append_history(entry)

    def get(self) -> list[str]:
        """Return a copy of all entries, oldest first."""
        return list(self._entries)

    def clear(self) -> None:
        """Drop every entry in memory and in persistence."""
        self._entries.clear()
        self._persistence.clear_history()
