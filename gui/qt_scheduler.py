"""
Qt-backed Scheduler for the notes autosaver.

Each ``call_later`` creates a single-shot QTimer owned by the scheduler's
parent object, so timers stop firing once the owning widget is destroyed.
"""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer


class QtScheduledTask:
    """Handle for one pending single-shot timer."""

    def __init__(self, timer: QTimer, callback: Callable[[], None]) -> None:
        self._timer = timer
        self._callback = callback
        self._done = False
        timer.timeout.connect(self._fire)

    def _fire(self) -> None:
        if self._done:
            return
        self._done = True
        self._timer.deleteLater()
        self._callback()

    def cancel(self) -> None:
        if self._done:
            return
        self._done = True
        self._timer.stop()
        self._timer.deleteLater()


class QtScheduler:
    """Scheduler that runs callbacks on the Qt event loop."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtScheduledTask:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        task = QtScheduledTask(timer, callback)
        timer.start(delay_ms)
        return task
