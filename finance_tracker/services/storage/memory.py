"""In-memory slot storage, for tests and throwaway sessions."""

import copy
import json
from typing import Optional

from finance_tracker.services.storage.interface import (
    KeyValueStore,
    SlotCorruptedError,
)


class InMemoryStore(KeyValueStore):
    """
    Dict-backed store.

    Records are deep-copied in and out so callers can never alias stored
    state. Raw strings can be planted with put_raw() to exercise the
    corrupted-slot path.
    """

    def __init__(self, initial: Optional[dict[str, list[dict]]] = None):
        self._slots: dict[str, object] = {}
        self.save_count = 0
        for slot, records in (initial or {}).items():
            self._slots[slot] = copy.deepcopy(records)

    def load(self, slot: str) -> Optional[list[dict]]:
        if slot not in self._slots:
            return None
        value = self._slots[slot]
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                raise SlotCorruptedError(f"Slot {slot} is not valid JSON: {e}")
        if not isinstance(value, list):
            raise SlotCorruptedError(f"Slot {slot} does not hold a list")
        return copy.deepcopy(value)

    def save(self, slot: str, records: list[dict]) -> None:
        self._slots[slot] = copy.deepcopy(list(records))
        self.save_count += 1

    def put_raw(self, slot: str, raw: str) -> None:
        """Store a raw serialized value, bypassing the record format."""
        self._slots[slot] = raw

    def clear(self) -> None:
        self._slots.clear()
