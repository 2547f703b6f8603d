"""
Command-line interface for GoalTracker.

Notes
-----
The CLI parses arguments and delegates to engine modules. With no command it
launches the GUI.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from goal_engine.errors import GoalTrackerError
from goal_engine.health import health_check
from goal_engine.logging_setup import configure_logging
from goal_engine.paths import AppPaths, app_paths_as_text, resolve_app_paths
from goal_engine.progress import filter_goals_by_type, format_progress
from goal_engine.settings_store import load_settings
from goal_engine.store.api import GoalStore, GoalType
from goal_engine.store.selection import open_goal_store

CLI_STREAM_LOG_LEVEL = "WARNING"


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser.
    """
    parser = argparse.ArgumentParser(
        prog="goaltracker",
        description="Personal goal tracker",
    )
    parser.add_argument(
        "--data-root",
        default=None,
        help="Override the data root (primarily for testing). If omitted, defaults are used.",
    )
    parser.add_argument(
        "--storage",
        choices=("auto", "sqlite", "keyvalue"),
        default=None,
        help="Override the storage backend from settings.",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("gui", help="Launch the desktop app (default)")

    list_p = sub.add_parser("list", help="List active goals")
    list_p.add_argument(
        "--type",
        dest="goal_type",
        choices=[t.value for t in GoalType],
        default=None,
        help="Only list goals of this type.",
    )

    sub.add_parser("reset-daily", help="Set progress of every active daily goal to 0")
    sub.add_parser("health", help="Check that every storage table is readable")
    sub.add_parser("paths", help="Print resolved data paths")

    return parser


def _open_store(args: argparse.Namespace, paths: AppPaths) -> GoalStore:
    settings = load_settings(paths.settings_path)
    configure_logging(paths.logs_root, settings.log_level, stream_level=CLI_STREAM_LOG_LEVEL)
    return open_goal_store(paths, backend=args.storage or settings.storage_backend)


def _cmd_list(store: GoalStore, goal_type: str | None) -> int:
    goals = list(store.get_goals())
    if goal_type is not None:
        goals = filter_goals_by_type(goals, GoalType(goal_type))
    if not goals:
        print("No active goals.")
        return 0
    for goal in goals:
        print(f"[{goal.id}] {goal.goal_type.value:<7} {goal.title}: {format_progress(goal)}")
    return 0


def _cmd_health(store: GoalStore) -> int:
    report = health_check(store)
    print(f"status: {report.status}")
    for name, ok in report.details.items():
        print(f"  {name}: {'ok' if ok else 'FAILED'}")
    for message in report.errors:
        print(f"ERROR: {message}")
    return 0 if report.healthy else 2


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point.

    Parameters
    ----------
    argv:
        Optional argument vector. If None, argparse uses sys.argv.

    Returns
    -------
    int
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    data_root = Path(args.data_root) if args.data_root else None

    if args.command in (None, "gui"):
        # Imported lazily so non-GUI commands work without a display.
        from gui.app import main as gui_main

        return gui_main(data_root=data_root)

    try:
        paths = resolve_app_paths(data_root)

        if args.command == "paths":
            print(app_paths_as_text(paths))
            return 0

        store = _open_store(args, paths)
        try:
            if args.command == "list":
                return _cmd_list(store, args.goal_type)
            if args.command == "reset-daily":
                store.reset_daily_goals()
                print("Daily goals reset.")
                return 0
            if args.command == "health":
                return _cmd_health(store)
        finally:
            store.close()
    except GoalTrackerError as exc:
        print(f"ERROR: {exc}")
        return 2

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
