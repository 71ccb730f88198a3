"""
Abstract Storage Interface

DESIGN DECISION: The ledger only needs a key-value store with named slots.
Each slot holds one whole collection as a list of records. This allows us to:
1. Keep reading data written by the web app (same slot names and records)
2. Use in-memory storage for testing
3. Swap JSON files for something else without touching the engine

The contract is deliberately tiny: load a slot, overwrite a slot.
No incremental writes, no schema versions.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for slot storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self, slot: str) -> Optional[list[dict]]:
        """
        Read the full collection stored under a slot.

        Args:
            slot: Slot name (e.g. "@finance:accounts")

        Returns:
            The stored records, or None if the slot has never been written

        Raises:
            SlotCorruptedError: If the slot exists but cannot be parsed
            StorageUnavailableError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    def save(self, slot: str, records: list[dict]) -> None:
        """
        Overwrite a slot with the full collection.

        Args:
            slot: Slot name
            records: Every record of the collection, in exposed order

        Raises:
            StorageError: If the write fails
        """
        pass

    def exists(self, slot: str) -> bool:
        """Check whether a slot has been written."""
        try:
            return self.load(slot) is not None
        except StorageError:
            return True


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SlotCorruptedError(StorageError):
    """Stored slot content could not be parsed."""
    pass


class StorageUnavailableError(StorageError):
    """Could not read from or write to the storage backend."""
    pass
