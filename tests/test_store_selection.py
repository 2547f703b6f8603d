from __future__ import annotations

from pathlib import Path

import pytest

import goal_engine.store.selection as selection
from goal_engine.paths import resolve_app_paths
from goal_engine.store.api import GoalType
from goal_engine.store.kv_store import KeyValueGoalStore
from goal_engine.store.sqlite_store import SqliteGoalStore


def test_sqlite_available_for_writable_path(tmp_path: Path) -> None:
    assert selection.sqlite_available(tmp_path / "probe.db") is True


def test_sqlite_unavailable_when_parent_is_missing(tmp_path: Path) -> None:
    assert selection.sqlite_available(tmp_path / "missing" / "probe.db") is False


def test_select_backend_honours_explicit_choice(tmp_path: Path) -> None:
    paths = resolve_app_paths(tmp_path)

    assert selection.select_backend("sqlite", paths) == "sqlite"
    assert selection.select_backend("keyvalue", paths) == "keyvalue"


def test_select_backend_rejects_unknown_name(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        selection.select_backend("mongodb", resolve_app_paths(tmp_path))


def test_auto_falls_back_to_key_value_when_sqlite_probe_fails(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(selection, "sqlite_available", lambda _db_path: False)

    store = selection.open_goal_store(resolve_app_paths(tmp_path))

    assert isinstance(store, KeyValueGoalStore)
    goal_id = store.add_goal("Read", None, 1, GoalType.DAILY)
    assert store.get_goal(goal_id) is not None
    assert (tmp_path / "goals_storage.json").is_file()


def test_auto_prefers_sqlite(tmp_path: Path) -> None:
    store = selection.open_goal_store(resolve_app_paths(tmp_path))
    try:
        assert isinstance(store, SqliteGoalStore)
        store.add_goal("Read", None, 1, GoalType.DAILY)
    finally:
        store.close()

    assert (tmp_path / "goals.db").is_file()
    assert (tmp_path / "logs").is_dir()
