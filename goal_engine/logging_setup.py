"""
Logging configuration for GoalTracker entry points.

Modules log through ``logging.getLogger(__name__)``. Only entry points (the
GUI and the CLI) call ``configure_logging``.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILENAME = "goaltracker.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    logs_root: Path | None,
    level: str = "INFO",
    *,
    stream_level: str | None = None,
) -> None:
    """
    Install stream and rotating file handlers on the root logger.

    Parameters
    ----------
    logs_root:
        Directory for ``goaltracker.log``. If None, only stderr is used.
    level:
        Root log level name.
    stream_level:
        Optional threshold for the stderr handler only. The log file still
        receives records at ``level``.
    """
    stream = logging.StreamHandler()
    if stream_level is not None:
        stream.setLevel(getattr(logging, stream_level.upper(), logging.WARNING))
    handlers: list[logging.Handler] = [stream]
    if logs_root is not None:
        logs_root.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                logs_root / LOG_FILENAME,
                maxBytes=1_000_000,
                backupCount=3,
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
