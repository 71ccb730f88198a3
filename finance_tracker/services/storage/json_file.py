"""
JSON File Storage Implementation

DESIGN DECISION: One JSON file per slot, in a single data directory.
1. The files are human-readable and easy to back up
2. The record format is exactly what the web app kept in localStorage,
   so an export from the browser can be dropped in as-is
3. A write goes to a temporary file first and is renamed over the slot
   file, so a crash mid-write never leaves half a collection on disk

Transient I/O errors (locked files on synced folders, full disk that
frees up) are retried with exponential backoff before giving up.
"""

import json
import os
import re
from pathlib import Path
from typing import Optional

from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from finance_tracker.services.storage.interface import (
    KeyValueStore,
    SlotCorruptedError,
    StorageUnavailableError,
)


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, OSError) and not isinstance(error, FileNotFoundError)


def slot_filename(slot: str) -> str:
    """
    File name used for a slot.

    "@finance:accounts" -> "finance_accounts.json"
    """
    stem = _UNSAFE_CHARS.sub("_", slot).strip("_.")
    if not stem:
        raise ValueError(f"Slot name has no usable characters: {slot!r}")
    return f"{stem}.json"


class JsonFileStore(KeyValueStore):
    """Slot storage backed by JSON files in a directory."""

    def __init__(
        self,
        data_dir: Path,
        max_attempts: int = 3,
        wait: Optional[wait_base] = None,
    ):
        """
        Initialize the store, creating the data directory if needed.

        Args:
            data_dir: Directory holding the slot files
            max_attempts: Attempts per read/write before giving up
            wait: Backoff strategy between attempts (tests pass wait_none())
        """
        self._data_dir = Path(data_dir)
        self._max_attempts = max_attempts
        self._wait = wait or wait_exponential(multiplier=0.1, min=0.1, max=2)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(
                f"Cannot create data directory {self._data_dir}: {e}"
            )

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, slot: str) -> Path:
        return self._data_dir / slot_filename(slot)

    def load(self, slot: str) -> Optional[list[dict]]:
        path = self.path_for(slot)
        if not path.exists():
            return None

        try:
            raw = self._with_retry(path.read_bytes)
        except FileNotFoundError:
            return None

        try:
            records = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise SlotCorruptedError(f"Slot {slot} ({path.name}) is not UTF-8 text: {e}")
        except json.JSONDecodeError as e:
            raise SlotCorruptedError(f"Slot {slot} ({path.name}) is not valid JSON: {e}")

        if not isinstance(records, list):
            raise SlotCorruptedError(f"Slot {slot} ({path.name}) does not hold a list")

        return records

    def save(self, slot: str, records: list[dict]) -> None:
        path = self.path_for(slot)
        text = json.dumps(list(records), ensure_ascii=False, indent=2)
        self._with_retry(self._write_atomic, path, text)

    def _write_atomic(self, path: Path, text: str) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, path)

    def _with_retry(self, fn, *args, **kwargs):
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=retry_if_exception(_is_transient),
            reraise=True,
        )
        try:
            return retrying(fn, *args, **kwargs)
        except FileNotFoundError:
            raise
        except (OSError, RetryError) as e:
            raise StorageUnavailableError(
                f"Storage I/O failed after {self._max_attempts} attempts: {e}"
            )
