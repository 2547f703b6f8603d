"""
Key-value storage used by the fallback GoalStore.

A KeyValueStorage holds string values under string keys, the same shape as a
browser's localStorage. ``JsonFileStorage`` keeps every key in a single JSON
document on disk and rewrites it atomically on each change.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """String key to string value storage."""

    def get_item(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    def remove_item(self, key: str) -> None:
        """Remove ``key`` if present."""
        ...


@dataclass(slots=True)
class MemoryStorage(KeyValueStorage):
    """In-process storage. Contents are lost when the process exits."""

    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


@dataclass(slots=True)
class JsonFileStorage(KeyValueStorage):
    """
    Storage persisted as one JSON object on disk.

    Parameters
    ----------
    path:
        JSON file. Created on the first write.

    Notes
    -----
    The file is read once, on first access, and cached. Every write replaces
    the file atomically through a temporary sibling.

    Raises
    ------
    OSError
        If the file cannot be read or written.
    ValueError
        If the file does not contain a JSON object of strings.
    """

    path: Path
    _items: dict[str, str] | None = field(default=None, init=False, repr=False, compare=False)

    def _load(self) -> dict[str, str]:
        if self._items is None:
            try:
                raw = self.path.read_text(encoding="utf-8")
            except FileNotFoundError:
                self._items = {}
                return self._items

            payload = json.loads(raw)
            if not isinstance(payload, dict) or not all(
                isinstance(v, str) for v in payload.values()
            ):
                raise ValueError(f"Key-value file is not a JSON object of strings: {self.path}")
            self._items = {str(k): v for k, v in payload.items()}
            logger.debug("Loaded %d key(s) from %s", len(self._items), self.path)
        return self._items

    def _flush(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8", newline="\n") as handle:
                json.dump(items, handle, indent=2, sort_keys=True, ensure_ascii=False)
                handle.write("\n")
            os.replace(temp_path, self.path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = dict(self._load())
        items[key] = value
        self._flush(items)
        self._items = items

    def remove_item(self, key: str) -> None:
        items = dict(self._load())
        if items.pop(key, None) is None:
            return
        self._flush(items)
        self._items = items
