"""
Filesystem locations for GoalTracker runtime data.

This module is the single place that decides where the application reads and
writes files. Everything lives under one data root:

- ``goals.db``: the SQLite database (fixed filename).
- ``goals_storage.json``: key-value fallback storage.
- ``settings.json``: application settings.
- ``logs/``: rotating log output.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path

from .errors import DataRootError

APP_DIR_NAME = "goaltracker"
DB_FILENAME = "goals.db"
KEY_VALUE_FILENAME = "goals_storage.json"
SETTINGS_FILENAME = "settings.json"


@dataclass(frozen=True, slots=True)
class AppPaths:
    """
    Concrete resolved paths for GoalTracker.

    Attributes
    ----------
    data_root:
        Root directory for all runtime data.
    db_path:
        SQLite database file.
    key_value_path:
        JSON file backing the key-value fallback store.
    settings_path:
        JSON settings file.
    logs_root:
        Directory for log files.
    """

    data_root: Path
    db_path: Path
    key_value_path: Path
    settings_path: Path
    logs_root: Path


def default_data_root() -> Path:
    """
    Resolve the default data root.

    Preference order:
    1) %LOCALAPPDATA%
    2) %APPDATA% (Roaming)
    3) $XDG_DATA_HOME
    4) ~/.local/share
    """
    for var in ("LOCALAPPDATA", "APPDATA", "XDG_DATA_HOME"):
        value = os.environ.get(var)
        if value:
            return Path(value) / APP_DIR_NAME

    try:
        home = Path.home()
    except RuntimeError as exc:
        raise DataRootError("Could not determine a home directory for application data.") from exc
    return home / ".local" / "share" / APP_DIR_NAME


def resolve_app_paths(data_root: Path | None = None) -> AppPaths:
    """
    Resolve all filesystem paths used by the application.

    Parameters
    ----------
    data_root:
        Optional override for the data root.

    Returns
    -------
    AppPaths
        Resolved paths. Nothing is created on disk.
    """
    root = (data_root or default_data_root()).expanduser().resolve()
    return AppPaths(
        data_root=root,
        db_path=root / DB_FILENAME,
        key_value_path=root / KEY_VALUE_FILENAME,
        settings_path=root / SETTINGS_FILENAME,
        logs_root=root / "logs",
    )


def ensure_app_directories(paths: AppPaths) -> None:
    """Create the data root and log directory if they do not already exist."""
    for directory in (paths.data_root, paths.logs_root):
        directory.mkdir(parents=True, exist_ok=True)


def app_paths_as_text(paths: AppPaths) -> str:
    """
    Render AppPaths as a readable multi-line string.

    Parameters
    ----------
    paths:
        Paths to render.

    Returns
    -------
    str
        One ``key: value`` line per path.
    """
    items = asdict(paths)
    return "\n".join(
        f"{key}: {items[key]}"
        for key in ("data_root", "db_path", "key_value_path", "settings_path", "logs_root")
    )
