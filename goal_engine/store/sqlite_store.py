"""
SQLite implementation of GoalStore.

This module owns the on-disk persistence format for goals, checklist items,
layout rows and the notes singleton.

Threading
---------
The connection is created lazily on first use and reused for the store's
lifetime. The application issues every call from the UI thread, one at a time.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Sequence

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
from .rules import coerce_goal_type, normalize_goal_fields
from .schema import SCHEMA_V1

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise sqlite3 and filesystem failures as StorageError, keeping the cause."""
    try:
        yield
    except (sqlite3.Error, OSError) as exc:
        logger.error("SQLite %s failed: %s", operation, exc)
        raise StorageError(str(exc)) from exc


def _row_to_goal(row: sqlite3.Row) -> Goal:
    return Goal(
        id=int(row["id"]),
        title=str(row["title"]),
        description=str(row["description"]) if row["description"] is not None else None,
        target_value=int(row["target_value"]),
        current_value=int(row["current_value"] or 0),
        goal_type=GoalType(row["goal_type"]),
        is_active=bool(row["is_active"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_checklist_item(row: sqlite3.Row) -> ChecklistItem:
    return ChecklistItem(
        id=int(row["id"]),
        goal_id=int(row["goal_id"]),
        title=str(row["title"]),
        is_completed=bool(row["is_completed"]),
        order_index=int(row["order_index"] or 0),
        created_at=row["created_at"],
    )


def _row_to_layout_item(row: sqlite3.Row) -> LayoutItem:
    return LayoutItem(
        id=int(row["id"]),
        goal_id=int(row["goal_id"]),
        x_position=float(row["x_position"]),
        y_position=float(row["y_position"]),
        width=float(row["width"]),
        height=float(row["height"]),
        section_type=GoalType(row["section_type"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


@dataclass(slots=True)
class SqliteGoalStore(GoalStore):
    """
    SQLite-backed GoalStore.

    Parameters
    ----------
    db_path:
        Path to the SQLite database. The file and its parent directory are
        created on first use.
    """

    db_path: Path
    _conn: sqlite3.Connection | None = field(default=None, init=False, repr=False, compare=False)

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            with _storage_errors("open"):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
                try:
                    conn.row_factory = sqlite3.Row
                    conn.execute("PRAGMA foreign_keys = ON")
                    conn.executescript(SCHEMA_V1)
                except sqlite3.Error:
                    conn.close()
                    raise
            logger.info("Opened goal database at %s", self.db_path)
            self._conn = conn
        return self._conn

    def _execute(self, operation: str, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        conn = self._connection()
        with _storage_errors(operation):
            with conn:
                return conn.execute(sql, params)

    def _select(self, operation: str, sql: str, params: Sequence[Any] = ()) -> list[sqlite3.Row]:
        conn = self._connection()
        with _storage_errors(operation):
            return conn.execute(sql, params).fetchall()

    def close(self) -> None:
        """Close the connection if one was opened."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

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
        cur = self._execute(
            "add_goal",
            "INSERT INTO goals (title, description, target_value, goal_type, current_value, is_active) "
            "VALUES (?, ?, ?, ?, 0, 1)",
            (fields.title, fields.description, fields.target_value, kind.value),
        )
        return int(cur.lastrowid or 0)

    def get_goals(self) -> Sequence[Goal]:
        """See GoalStore.get_goals."""
        rows = self._select(
            "get_goals",
            "SELECT * FROM goals WHERE is_active = 1 ORDER BY created_at DESC, id DESC",
        )
        return [_row_to_goal(r) for r in rows]

    def get_goal(self, goal_id: GoalId) -> Goal | None:
        """See GoalStore.get_goal."""
        rows = self._select("get_goal", "SELECT * FROM goals WHERE id = ?", (goal_id,))
        return _row_to_goal(rows[0]) if rows else None

    def increment_goal(self, goal_id: GoalId, amount: int) -> None:
        """See GoalStore.increment_goal."""
        self._execute(
            "increment_goal",
            "UPDATE goals SET current_value = current_value + ?, updated_at = datetime('now') "
            "WHERE id = ?",
            (amount, goal_id),
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
        self._execute(
            "update_goal",
            "UPDATE goals SET title = ?, description = ?, target_value = ?, "
            "updated_at = datetime('now') WHERE id = ?",
            (fields.title, fields.description, fields.target_value, goal_id),
        )

    def delete_goal(self, goal_id: GoalId) -> None:
        """See GoalStore.delete_goal."""
        self._execute(
            "delete_goal",
            "UPDATE goals SET is_active = 0, updated_at = datetime('now') WHERE id = ?",
            (goal_id,),
        )

    def reset_daily_goals(self) -> None:
        """See GoalStore.reset_daily_goals."""
        cur = self._execute(
            "reset_daily_goals",
            "UPDATE goals SET current_value = 0, updated_at = datetime('now') "
            "WHERE goal_type = ? AND is_active = 1",
            (GoalType.DAILY.value,),
        )
        logger.info("Reset %d daily goal(s)", cur.rowcount)

    # Checklist items

    def add_checklist_item(self, goal_id: GoalId, title: str, order_index: int) -> int:
        cur = self._execute(
            "add_checklist_item",
            "INSERT INTO checklist_items (goal_id, title, order_index, is_completed) "
            "VALUES (?, ?, ?, 0)",
            (goal_id, title, order_index),
        )
        return int(cur.lastrowid or 0)

    def get_checklist_items(self, goal_id: GoalId) -> Sequence[ChecklistItem]:
        rows = self._select(
            "get_checklist_items",
            "SELECT * FROM checklist_items WHERE goal_id = ? ORDER BY order_index, id",
            (goal_id,),
        )
        return [_row_to_checklist_item(r) for r in rows]

    def toggle_checklist_item(self, item_id: int, is_completed: bool) -> None:
        self._execute(
            "toggle_checklist_item",
            "UPDATE checklist_items SET is_completed = ? WHERE id = ?",
            (1 if is_completed else 0, item_id),
        )

    def delete_checklist_item(self, item_id: int) -> None:
        self._execute(
            "delete_checklist_item", "DELETE FROM checklist_items WHERE id = ?", (item_id,)
        )

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
        self._execute(
            "save_layout",
            "INSERT INTO layout (goal_id, x_position, y_position, width, height, section_type, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, datetime('now')) "
            "ON CONFLICT(goal_id) DO UPDATE SET "
            "x_position = excluded.x_position, y_position = excluded.y_position, "
            "width = excluded.width, height = excluded.height, "
            "section_type = excluded.section_type, updated_at = excluded.updated_at",
            (goal_id, float(x_position), float(y_position), float(width), float(height), section.value),
        )

    def get_layout(self) -> Sequence[LayoutItem]:
        rows = self._select("get_layout", "SELECT * FROM layout ORDER BY goal_id")
        return [_row_to_layout_item(r) for r in rows]

    # Notes

    def save_notes(self, content: str) -> None:
        """See GoalStore.save_notes."""
        self._execute(
            "save_notes",
            "INSERT INTO notes (id, content, updated_at) VALUES (?, ?, datetime('now')) "
            "ON CONFLICT(id) DO UPDATE SET content = excluded.content, updated_at = excluded.updated_at",
            (NOTE_SINGLETON_ID, content),
        )

    def get_notes(self) -> Note | None:
        rows = self._select(
            "get_notes", "SELECT * FROM notes WHERE id = ?", (NOTE_SINGLETON_ID,)
        )
        if not rows:
            return None
        row = rows[0]
        return Note(
            id=int(row["id"]),
            content=str(row["content"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
