from __future__ import annotations

from pathlib import Path

import pytest

import goaltracker.cli as cli_module
from goal_engine.errors import DataRootError
from goal_engine.store.api import GoalType
from goal_engine.store.sqlite_store import SqliteGoalStore


def _seed(data_root: Path) -> None:
    store = SqliteGoalStore(db_path=data_root / "goals.db")
    try:
        read = store.add_goal("Read", None, 10, GoalType.DAILY)
        store.increment_goal(read, 3)
        store.add_goal("Run", None, 4, GoalType.WEEKLY)
    finally:
        store.close()


def test_cli_paths_prints_data_root(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = cli_module.main(["--data-root", str(tmp_path), "paths"])
    out = capsys.readouterr().out
    assert rc == 0
    assert f"data_root: {tmp_path.resolve()}" in out
    assert "goals.db" in out


def test_cli_list_on_empty_store(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = cli_module.main(["--data-root", str(tmp_path), "--storage", "keyvalue", "list"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "No active goals." in out


def test_cli_list_filters_by_type(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _seed(tmp_path)

    rc = cli_module.main(["--data-root", str(tmp_path), "--storage", "sqlite", "list", "--type", "daily"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "Read: 3 / 10 (30%)" in out
    assert "Run" not in out


def test_cli_reset_daily_zeroes_daily_progress(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _seed(tmp_path)

    rc = cli_module.main(["--data-root", str(tmp_path), "--storage", "sqlite", "reset-daily"])
    assert rc == 0
    assert "Daily goals reset." in capsys.readouterr().out

    cli_module.main(["--data-root", str(tmp_path), "--storage", "sqlite", "list"])
    out = capsys.readouterr().out
    assert "Read: 0 / 10 (0%)" in out


def test_cli_health_reports_healthy_store(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = cli_module.main(["--data-root", str(tmp_path), "--storage", "keyvalue", "health"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "status: healthy" in out


def test_cli_health_returns_2_on_unreadable_storage(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "goals_storage.json").write_text("{not json", encoding="utf-8")

    rc = cli_module.main(["--data-root", str(tmp_path), "--storage", "keyvalue", "health"])
    out = capsys.readouterr().out
    assert rc == 2
    assert "status: error" in out
    assert "ERROR: Goals table error:" in out


def test_cli_returns_2_on_domain_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def _boom(_data_root: Path | None) -> None:
        raise DataRootError("no home")

    monkeypatch.setattr(cli_module, "resolve_app_paths", _boom)

    rc = cli_module.main(["list"])
    out = capsys.readouterr().out
    assert rc == 2
    assert "ERROR: no home" in out


def test_cli_storage_flag_overrides_settings(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "settings.json").write_text('{"storage_backend": "sqlite"}', encoding="utf-8")

    rc = cli_module.main(["--data-root", str(tmp_path), "--storage", "keyvalue", "list"])
    capsys.readouterr()

    assert rc == 0
    assert (tmp_path / "goals_storage.json").exists() is False
    assert (tmp_path / "goals.db").exists() is False


def test_cli_keeps_info_logs_out_of_terminal(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = cli_module.main(["--data-root", str(tmp_path), "--storage", "keyvalue", "list"])
    captured = capsys.readouterr()

    assert rc == 0
    assert captured.out.strip() == "No active goals."
    assert "storage backend" not in captured.err
    log_text = (tmp_path / "logs" / "goaltracker.log").read_text(encoding="utf-8")
    assert "Using keyvalue storage backend" in log_text
