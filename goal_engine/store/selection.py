"""
Backend selection for GoalStore.

The application picks its storage backend exactly once, at start-up, and hands
the resulting GoalStore to everything else. No other module inspects which
backend is active.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from ..clock import Clock, SystemClock
from ..paths import AppPaths, ensure_app_directories
from .api import GoalStore
from .key_value import JsonFileStorage
from .kv_store import KeyValueGoalStore
from .sqlite_store import SqliteGoalStore

logger = logging.getLogger(__name__)

SQLITE_BACKEND = "sqlite"
KEY_VALUE_BACKEND = "keyvalue"
AUTO_BACKEND = "auto"


def sqlite_available(db_path: Path) -> bool:
    """
    Probe whether SQLite can open and query the database file.

    Parameters
    ----------
    db_path:
        Database file to probe. It is created if absent.

    Returns
    -------
    bool
        True if a connection opened and ``SELECT 1`` succeeded.
    """
    try:
        conn = sqlite3.connect(db_path)
        try:
            conn.execute("SELECT 1").fetchone()
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as exc:
        logger.warning("SQLite unavailable at %s: %s", db_path, exc)
        return False
    return True


def select_backend(requested: str, paths: AppPaths) -> str:
    """
    Resolve the requested backend name to a concrete backend.

    Parameters
    ----------
    requested:
        ``"auto"``, ``"sqlite"`` or ``"keyvalue"``.
    paths:
        Resolved application paths.

    Returns
    -------
    str
        ``"sqlite"`` or ``"keyvalue"``.

    Raises
    ------
    ValueError
        If ``requested`` is not a known backend name.
    """
    if requested in (SQLITE_BACKEND, KEY_VALUE_BACKEND):
        return requested
    if requested != AUTO_BACKEND:
        raise ValueError(f"Unknown storage backend: {requested!r}")
    return SQLITE_BACKEND if sqlite_available(paths.db_path) else KEY_VALUE_BACKEND


def open_goal_store(
    paths: AppPaths,
    *,
    backend: str = AUTO_BACKEND,
    clock: Clock | None = None,
) -> GoalStore:
    """
    Convenience constructor that ensures directories exist and picks a backend.

    Parameters
    ----------
    paths:
        Resolved application paths.
    backend:
        Requested backend name (see ``select_backend``).
    clock:
        Timestamp source for the key-value backend.

    Returns
    -------
    GoalStore
        Ready-to-use store.
    """
    ensure_app_directories(paths)
    chosen = select_backend(backend, paths)
    logger.info("Using %s storage backend (requested: %s)", chosen, backend)

    if chosen == SQLITE_BACKEND:
        return SqliteGoalStore(db_path=paths.db_path)
    return KeyValueGoalStore(
        storage=JsonFileStorage(path=paths.key_value_path),
        clock=clock or SystemClock(),
    )
