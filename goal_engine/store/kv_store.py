"""
Key-value implementation of GoalStore.

Used when SQLite is unavailable. Each table is one JSON-encoded list of
records under its own key; every operation is a read, an in-memory change and
a write of that one key. Filtering and ordering emulate the SQL statements in
``sqlite_store`` so both backends return the same shapes in the same order.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Sequence

from ..clock import Clock, SystemClock, format_timestamp
from .api import (
    NOTE_SINGLETON_ID,
    ChecklistItem,
    Goal,
    GoalId,
    GoalStore,
    GoalType,
    LayoutItem,
    Note,
)
from .errors import StorageError
from .key_value import KeyValueStorage
from .rules import coerce_goal_type, normalize_goal_fields

logger = logging.getLogger(__name__)

KEY_PREFIX = "goaltracker"
GOALS_KEY = f"{KEY_PREFIX}.goals"
CHECKLIST_KEY = f"{KEY_PREFIX}.checklist_items"
LAYOUT_KEY = f"{KEY_PREFIX}.layout"
NOTES_KEY = f"{KEY_PREFIX}.notes"
SEQUENCE_KEY = f"{KEY_PREFIX}.sequence"

Record = dict[str, Any]


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise storage and decoding failures as StorageError, keeping the cause."""
    try:
        yield
    except (OSError, ValueError, TypeError, KeyError) as exc:
        logger.error("Key-value %s failed: %s", operation, exc)
        raise StorageError(str(exc)) from exc


def _goal_from_record(record: Record) -> Goal:
    return Goal(
        id=int(record["id"]),
        title=str(record["title"]),
        description=record.get("description"),
        target_value=int(record["target_value"]),
        current_value=int(record.get("current_value", 0)),
        goal_type=GoalType(record["goal_type"]),
        is_active=bool(record.get("is_active", True)),
        created_at=record.get("created_at"),
        updated_at=record.get("updated_at"),
    )


def _checklist_item_from_record(record: Record) -> ChecklistItem:
    return ChecklistItem(
        id=int(record["id"]),
        goal_id=int(record["goal_id"]),
        title=str(record["title"]),
        is_completed=bool(record.get("is_completed", False)),
        order_index=int(record.get("order_index", 0)),
        created_at=record.get("created_at"),
    )


def _layout_item_from_record(record: Record) -> LayoutItem:
    return LayoutItem(
        id=int(record["id"]),
        goal_id=int(record["goal_id"]),
        x_position=float(record["x_position"]),
        y_position=float(record["y_position"]),
        width=float(record["width"]),
        height=float(record["height"]),
        section_type=GoalType(record["section_type"]),
        created_at=record.get("created_at"),
        updated_at=record.get("updated_at"),
    )


@dataclass(slots=True)
class KeyValueGoalStore(GoalStore):
    """
    GoalStore over a KeyValueStorage.

    Parameters
    ----------
    storage:
        Backing key-value storage.
    clock:
        Source of ``created_at``/``updated_at`` timestamps.
    """

    storage: KeyValueStorage
    clock: Clock = field(default_factory=SystemClock)

    def _read(self, key: str) -> list[Record]:
        raw = self.storage.get_item(key)
        if raw is None:
            return []
        rows = json.loads(raw)
        if not isinstance(rows, list):
            raise ValueError(f"Expected a JSON list under {key!r}")
        return rows

    def _write(self, key: str, rows: list[Record]) -> None:
        self.storage.set_item(key, json.dumps(rows, ensure_ascii=False))

    def _next_id(self, table: str) -> int:
        # Ids are never reused, matching SQLite AUTOINCREMENT.
        raw = self.storage.get_item(SEQUENCE_KEY)
        sequence: dict[str, int] = json.loads(raw) if raw is not None else {}
        next_id = int(sequence.get(table, 0)) + 1
        sequence[table] = next_id
        self.storage.set_item(SEQUENCE_KEY, json.dumps(sequence, sort_keys=True))
        return next_id

    def close(self) -> None:
        """Nothing to release; present for interface parity."""

    # Goals

    def add_goal(
        self,
        title: str,
        description: str | None,
        target_value: int,
        goal_type: GoalType,
    ) -> GoalId:
        """See GoalStore.add_goal."""
        fields = normalize_goal_fields(title, description, target_value)
        kind = coerce_goal_type(goal_type)
        with _storage_errors("add_goal"):
            rows = self._read(GOALS_KEY)
            now = format_timestamp(self.clock)
            goal_id = self._next_id("goals")
            rows.append(
                {
                    "id": goal_id,
                    "title": fields.title,
                    "description": fields.description,
                    "target_value": fields.target_value,
                    "current_value": 0,
                    "goal_type": kind.value,
                    "is_active": True,
                    "created_at": now,
                    "updated_at": now,
                }
            )
            self._write(GOALS_KEY, rows)
        return goal_id

    def get_goals(self) -> Sequence[Goal]:
        """See GoalStore.get_goals."""
        with _storage_errors("get_goals"):
            rows = [r for r in self._read(GOALS_KEY) if r.get("is_active", True)]
            rows.sort(key=lambda r: (r.get("created_at") or "", int(r["id"])), reverse=True)
            return [_goal_from_record(r) for r in rows]

    def get_goal(self, goal_id: GoalId) -> Goal | None:
        """See GoalStore.get_goal."""
        with _storage_errors("get_goal"):
            for row in self._read(GOALS_KEY):
                if int(row["id"]) == goal_id:
                    return _goal_from_record(row)
        return None

    def _update_goals(
        self,
        operation: str,
        predicate: Callable[[Record], bool],
        change: Record | None = None,
        delta: int = 0,
    ) -> int:
        with _storage_errors(operation):
            rows = self._read(GOALS_KEY)
            now = format_timestamp(self.clock)
            matched = 0
            for row in rows:
                if not predicate(row):
                    continue
                if change:
                    row.update(change)
                if delta:
                    row["current_value"] = int(row.get("current_value", 0)) + delta
                row["updated_at"] = now
                matched += 1
            if matched:
                self._write(GOALS_KEY, rows)
        return matched

    def increment_goal(self, goal_id: GoalId, amount: int) -> None:
        """See GoalStore.increment_goal."""
        self._update_goals(
            "increment_goal",
            lambda r: int(r["id"]) == goal_id,
            delta=amount,
        )

    def update_goal(
        self,
        goal_id: GoalId,
        title: str,
        description: str | None,
        target_value: int,
    ) -> None:
        """See GoalStore.update_goal."""
        fields = normalize_goal_fields(title, description, target_value)
        self._update_goals(
            "update_goal",
            lambda r: int(r["id"]) == goal_id,
            change={
                "title": fields.title,
                "description": fields.description,
                "target_value": fields.target_value,
            },
        )

    def delete_goal(self, goal_id: GoalId) -> None:
        """See GoalStore.delete_goal."""
        self._update_goals(
            "delete_goal",
            lambda r: int(r["id"]) == goal_id,
            change={"is_active": False},
        )

    def reset_daily_goals(self) -> None:
        """See GoalStore.reset_daily_goals."""
        matched = self._update_goals(
            "reset_daily_goals",
            lambda r: r.get("goal_type") == GoalType.DAILY.value and r.get("is_active", True),
            change={"current_value": 0},
        )
        logger.info("Reset %d daily goal(s)", matched)

    # Checklist items

    def add_checklist_item(self, goal_id: GoalId, title: str, order_index: int) -> int:
        with _storage_errors("add_checklist_item"):
            rows = self._read(CHECKLIST_KEY)
            item_id = self._next_id("checklist_items")
            rows.append(
                {
                    "id": item_id,
                    "goal_id": goal_id,
                    "title": title,
                    "is_completed": False,
                    "order_index": order_index,
                    "created_at": format_timestamp(self.clock),
                }
            )
            self._write(CHECKLIST_KEY, rows)
        return item_id

    def get_checklist_items(self, goal_id: GoalId) -> Sequence[ChecklistItem]:
        with _storage_errors("get_checklist_items"):
            rows = [r for r in self._read(CHECKLIST_KEY) if int(r["goal_id"]) == goal_id]
            rows.sort(key=lambda r: (int(r.get("order_index", 0)), int(r["id"])))
            return [_checklist_item_from_record(r) for r in rows]

    def toggle_checklist_item(self, item_id: int, is_completed: bool) -> None:
        with _storage_errors("toggle_checklist_item"):
            rows = self._read(CHECKLIST_KEY)
            for row in rows:
                if int(row["id"]) == item_id:
                    row["is_completed"] = bool(is_completed)
                    self._write(CHECKLIST_KEY, rows)
                    return

    def delete_checklist_item(self, item_id: int) -> None:
        with _storage_errors("delete_checklist_item"):
            rows = self._read(CHECKLIST_KEY)
            kept = [r for r in rows if int(r["id"]) != item_id]
            if len(kept) != len(rows):
                self._write(CHECKLIST_KEY, kept)

    # Layout

    def save_layout(
        self,
        goal_id: GoalId,
        x_position: float,
        y_position: float,
        width: float,
        height: float,
        section_type: GoalType,
    ) -> None:
        """See GoalStore.save_layout."""
        section = coerce_goal_type(section_type)
        with _storage_errors("save_layout"):
            rows = self._read(LAYOUT_KEY)
            now = format_timestamp(self.clock)
            values = {
                "x_position": float(x_position),
                "y_position": float(y_position),
                "width": float(width),
                "height": float(height),
                "section_type": section.value,
                "updated_at": now,
            }
            for row in rows:
                if int(row["goal_id"]) == goal_id:
                    row.update(values)
                    break
            else:
                rows.append(
                    {"id": self._next_id("layout"), "goal_id": goal_id, "created_at": now, **values}
                )
            self._write(LAYOUT_KEY, rows)

    def get_layout(self) -> Sequence[LayoutItem]:
        with _storage_errors("get_layout"):
            rows = sorted(self._read(LAYOUT_KEY), key=lambda r: int(r["goal_id"]))
            return [_layout_item_from_record(r) for r in rows]

    # Notes

    def save_notes(self, content: str) -> None:
        """See GoalStore.save_notes."""
        with _storage_errors("save_notes"):
            now = format_timestamp(self.clock)
            raw = self.storage.get_item(NOTES_KEY)
            previous: Record = json.loads(raw) if raw is not None else {}
            record = {
                "id": NOTE_SINGLETON_ID,
                "content": content,
                "created_at": previous.get("created_at", now),
                "updated_at": now,
            }
            self.storage.set_item(NOTES_KEY, json.dumps(record, ensure_ascii=False))

    def get_notes(self) -> Note | None:
        with _storage_errors("get_notes"):
            raw = self.storage.get_item(NOTES_KEY)
            if raw is None:
                return None
            record = json.loads(raw)
            return Note(
                id=int(record.get("id", NOTE_SINGLETON_ID)),
                content=str(record["content"]),
                created_at=record.get("created_at"),
                updated_at=record.get("updated_at"),
            )
