"""
Storage Services Package

Provides the abstract key-value slot interface and its implementations.
JSON files on disk are the default backend; the in-memory store is used
by tests.
"""

from finance_tracker.services.storage.interface import (
    KeyValueStore,
    SlotCorruptedError,
    StorageError,
    StorageUnavailableError,
)
from finance_tracker.services.storage.json_file import JsonFileStore, slot_filename
from finance_tracker.services.storage.memory import InMemoryStore

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "SlotCorruptedError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
    "slot_filename",
]
