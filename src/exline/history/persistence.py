"""Command-line history persistence backends."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

HISTORY_SCHEMA_VERSION = 1

_LOGGER = logging.getLogger(__name__)


class HistoryPersistenceError(RuntimeError):
    """Base persistence error for history file operations."""


class HistorySchemaVersionError(HistoryPersistenceError):
    """Raised when persisted payload schema version is unsupported."""


class HistoryDecodeError(HistoryPersistenceError):
    """Raised when persisted payload cannot be decoded/validated."""


class HistoryPersistence(Protocol):
    """Storage collaborator owning history load/flush policy."""

    def load_history(self) -> list[str]:
        """Return persisted entries, oldest first."""

    def append_history(self, entry: str) -> None:
        """Record one appended entry; flushing is the backend's decision.

        Args:
            entry: Command line just appended in memory.
        """

    def clear_history(self) -> None:
        """Drop all persisted entries."""


class PersistedHistoryV1(BaseModel):
    """Versioned persisted history payload."""

    model_config = ConfigDict(extra="forbid")

    schema_version: int = HISTORY_SCHEMA_VERSION
    entries: list[str] = Field(default_factory=list)


class InMemoryHistoryPersistence:
    """List-backed persistence for tests and throwaway sessions."""

    def __init__(self, entries: list[str] | None = None) -> None:
        """Seed backend with optional entries.

        Args:
            entries: Entries returned by the first load.
        """
        self.entries: list[str] = list(entries or [])

    def load_history(self) -> list[str]:
        """Return a copy of stored entries."""
        return list(self.entries)

    def append_history(self, entry: str) -> None:
        """Append entry immediately."""
        self.entries.append(entry)

    def clear_history(self) -> None:
        """Drop stored entries."""
        self.entries.clear()


class FileHistoryPersistence:
    """JSON file persistence with bounded size and batched flushes."""

    def __init__(
        self,
        path: Path,
        *,
        max_entries: int = 50,
        flush_every: int = 1,
    ) -> None:
        """Configure file target and flush policy.

        Args:
            path: History JSON file.
            max_entries: Newest entries kept when writing.
            flush_every: Number of appends between automatic flushes.
        """
        self._path = path
        self._max_entries = max_entries
        self._flush_every = max(1, flush_every)
        self._entries: list[str] = []
        self._pending = 0
        self._loaded = False

    @property
    def path(self) -> Path:
        """History file path."""
        return self._path

    @property
    def pending(self) -> int:
        """Appends not yet written to disk."""
        return self._pending

    def load_history(self) -> list[str]:
        """Load entries from disk, empty when the file is missing.

        Appends not yet written are kept after the loaded entries.

        Returns:
            Persisted entries, oldest first.

        Raises:
            HistoryDecodeError: If JSON decode or payload validation fails.
            HistorySchemaVersionError: If schema version is unsupported.
        """
        unsaved = self._entries[len(self._entries) - self._pending :] if self._pending else []
        if not self._path.exists():
            self._adopt([], unsaved)
            return []
        raw = self._path.read_text(encoding="utf-8")
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise HistoryDecodeError(f"Invalid history JSON: {exc}") from exc
        migrated = _migrate_payload(decoded)
        try:
            payload = PersistedHistoryV1.model_validate(migrated)
        except ValidationError as exc:
            raise HistoryDecodeError(f"Invalid history payload: {exc}") from exc
        self._adopt(list(payload.entries), unsaved)
        return list(payload.entries)

    def _adopt(self, persisted: list[str], unsaved: list[str]) -> None:
        self._entries = persisted + unsaved
        self._pending = len(unsaved)
        self._loaded = True

    def append_history(self, entry: str) -> None:
        """Buffer entry and flush when the batch is full.

        The file is read first when nothing was loaded yet, so an append
        never replaces history it has not seen. While the file stays
        unreadable, entries are only buffered.
        """
        if not self._loaded:
            try:
                self.load_history()
            except HistoryPersistenceError as exc:
                _LOGGER.warning(
                    "History file %s unreadable, buffering entry: %s", self._path, exc
                )
        self._entries.append(entry)
        self._pending += 1
        if self._pending >= self._flush_every:
            self.flush()

    def clear_history(self) -> None:
        """Drop entries and write an empty file."""
        self._entries = []
        self._pending = 1
        self._loaded = True
        self.flush()

    def flush(self) -> bool:
        """Write bounded entries atomically.

        Write failures are logged and the batch stays pending for the next
        flush.

        Returns:
            True when the file was written.
        """
        if self._pending == 0:
            return True
        if not self._loaded:
            _LOGGER.warning("History not loaded from %s, flush skipped.", self._path)
            return False
        if len(self._entries) > self._max_entries:
            self._entries = self._entries[-self._max_entries :]
        payload = PersistedHistoryV1(entries=self._entries)
        temp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(payload.model_dump_json(indent=2), encoding="utf-8")
            temp_path.replace(self._path)
        except OSError as exc:
            _LOGGER.warning("Failed to persist history to %s: %s", self._path, exc)
            return False
        self._pending = 0
        return True


def recover_corrupt_history(path: Path) -> Path | None:
    """Move unreadable history file aside and return backup path.

    Args:
        path: History file path.

    Returns:
        Backup path when source exists, else None.
    """
    if not path.exists():
        return None
    timestamp = int(time.time())
    backup = path.with_name(f"{path.name}.corrupt-{timestamp}")
    path.replace(backup)
    return backup


def _migrate_payload(payload: object) -> dict[str, object]:
    """Migrate persisted payload into latest schema.

    A bare JSON list of strings is accepted as an unversioned payload.

    Args:
        payload: Decoded JSON payload object.

    Returns:
        Migrated payload matching latest schema.

    Raises:
        HistoryDecodeError: If payload is neither an object nor a list.
        HistorySchemaVersionError: If schema version is unsupported.
    """
    if isinstance(payload, list):
        return {"schema_version": HISTORY_SCHEMA_VERSION, "entries": payload}
    if not isinstance(payload, dict):
        raise HistoryDecodeError("Invalid history payload: expected JSON object.")
    version = payload.get("schema_version")
    if version == HISTORY_SCHEMA_VERSION:
        return payload
    raise HistorySchemaVersionError(
        f"Unsupported history schema version: {version!r}. "
        f"Expected {HISTORY_SCHEMA_VERSION}."
    )
