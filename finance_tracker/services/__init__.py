"""Services package."""

from finance_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    SlotCorruptedError,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "SlotCorruptedError",
    "StorageError",
    "StorageUnavailableError",
]
