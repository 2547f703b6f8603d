"""SQLite schema for GoalStore.

Notes
-----
``layout.goal_id`` is unique so that saving a layout replaces the goal's row
instead of accumulating one row per save.
"""

from __future__ import annotations

SCHEMA_V1 = """
PRAGMA journal_mode = WAL;

CREATE TABLE IF NOT EXISTS goals (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    title         TEXT NOT NULL,
    description   TEXT,
    target_value  INTEGER NOT NULL,
    current_value INTEGER DEFAULT 0,
    goal_type     TEXT NOT NULL CHECK (goal_type IN ('daily','weekly','monthly','yearly')),
    created_at    DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at    DATETIME DEFAULT CURRENT_TIMESTAMP,
    is_active     BOOLEAN DEFAULT TRUE
);

CREATE TABLE IF NOT EXISTS checklist_items (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    goal_id      INTEGER NOT NULL,
    title        TEXT NOT NULL,
    is_completed BOOLEAN DEFAULT FALSE,
    order_index  INTEGER DEFAULT 0,
    created_at   DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (goal_id) REFERENCES goals(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS layout (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    goal_id      INTEGER NOT NULL UNIQUE,
    x_position   REAL DEFAULT 0,
    y_position   REAL DEFAULT 0,
    width        REAL DEFAULT 1,
    height       REAL DEFAULT 1,
    section_type TEXT NOT NULL CHECK (section_type IN ('daily','weekly','monthly','yearly')),
    created_at   DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at   DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (goal_id) REFERENCES goals(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS notes (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    content    TEXT NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_goals_active_created ON goals(is_active, created_at);
CREATE INDEX IF NOT EXISTS idx_checklist_goal_order ON checklist_items(goal_id, order_index);
"""
