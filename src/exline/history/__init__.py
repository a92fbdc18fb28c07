"""Command-line history public surface."""

from exline.history.persistence import (
    HISTORY_SCHEMA_VERSION,
    FileHistoryPersistence,
    HistoryDecodeError,
    HistoryPersistence,
    HistoryPersistenceError,
    HistorySchemaVersionError,
    InMemoryHistoryPersistence,
    recover_corrupt_history,
)
from exline.history.store import CommandLineHistory, HistoryStoreError

__all__ = [
    "HISTORY_SCHEMA_VERSION",
    "CommandLineHistory",
    "FileHistoryPersistence",
    "HistoryDecodeError",
    "HistoryPersistence",
    "HistoryPersistenceError",
    "HistorySchemaVersionError",
    "HistoryStoreError",
    "InMemoryHistoryPersistence",
    "recover_corrupt_history",
]
