from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = frozenset({"auto", "sqlite", "keyvalue"})
LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})


@dataclass(frozen=True, slots=True)
class AppSettings:
    """
    Persisted application settings.

    Notes
    -----
    Settings only control defaults. The storage backend is read once at
    start-up; changing it takes effect on the next launch.
    """

    storage_backend: str  # "auto" | "sqlite" | "keyvalue"
    debounce_ms: int
    saved_display_ms: int
    increment_amount: int
    log_level: str  # "DEBUG" | "INFO" | "WARNING" | "ERROR"

    @staticmethod
    def defaults() -> "AppSettings":
        return AppSettings(
            storage_backend="auto",
            debounce_ms=1000,
            saved_display_ms=2000,
            increment_amount=1,
            log_level="INFO",
        )


def _positive_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return default
    return value


def load_settings(settings_path: Path) -> AppSettings:
    """
    Load settings from disk.

    Parameters
    ----------
    settings_path:
        JSON settings file.

    Returns
    -------
    AppSettings
        Loaded settings, or defaults if missing/unreadable. Individual invalid
        values are replaced by their defaults.
    """
    defaults = AppSettings.defaults()
    try:
        payload = json.loads(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return defaults
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", settings_path, exc)
        return defaults

    if not isinstance(payload, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", settings_path)
        return defaults

    storage_backend = payload.get("storage_backend", defaults.storage_backend)
    if storage_backend not in STORAGE_BACKENDS:
        storage_backend = defaults.storage_backend

    log_level = str(payload.get("log_level", defaults.log_level)).upper()
    if log_level not in LOG_LEVELS:
        log_level = defaults.log_level

    return AppSettings(
        storage_backend=str(storage_backend),
        debounce_ms=_positive_int(payload.get("debounce_ms"), defaults.debounce_ms),
        saved_display_ms=_positive_int(payload.get("saved_display_ms"), defaults.saved_display_ms),
        increment_amount=_positive_int(payload.get("increment_amount"), defaults.increment_amount),
        log_level=log_level,
    )


def save_settings(settings_path: Path, settings: AppSettings) -> None:
    """
    Save settings to disk.

    Parameters
    ----------
    settings_path:
        JSON settings file. Its parent directory is created if needed.
    settings:
        Settings to persist.
    """
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "storage_backend": settings.storage_backend,
        "debounce_ms": settings.debounce_ms,
        "saved_display_ms": settings.saved_display_ms,
        "increment_amount": settings.increment_amount,
        "log_level": settings.log_level,
    }
    settings_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
