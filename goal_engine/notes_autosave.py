"""
Debounced autosave for the notes singleton.

Every edit restarts a single pending timer; only the last edit inside the
debounce window reaches the store. A save whose content equals the last
successfully saved content never touches the store.

Timers
------
Scheduling goes through the ``Scheduler`` protocol so the GUI can use Qt
timers and tests can drive time by hand. At most one debounce timer and one
"saved" display timer are pending at any moment, and ``close`` cancels both.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Protocol

from .store.api import GoalStore
from .store.errors import GoalStoreError

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 1000
DEFAULT_SAVED_DISPLAY_MS = 2000

LOAD_FAILED_MESSAGE = "Failed to load notes"
SAVE_FAILED_MESSAGE = "Failed to save notes"


class SaveStatus(str, Enum):
    """Display-only save state."""

    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class ScheduledTask(Protocol):
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        ...


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        """Run ``callback`` once after ``delay_ms`` milliseconds."""
        ...


class NoteAutosaver:
    """
    Debounced writer for the notes singleton.

    Parameters
    ----------
    store:
        Persistence backend.
    scheduler:
        Source of cancelable one-shot timers.
    debounce_ms:
        Quiet period after the last edit before saving.
    saved_display_ms:
        How long ``SAVED`` is shown before reverting to ``IDLE``.
    on_change:
        Called with no arguments whenever status, error or content changes.
    """

    def __init__(
        self,
        store: GoalStore,
        scheduler: Scheduler,
        *,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        saved_display_ms: int = DEFAULT_SAVED_DISPLAY_MS,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._debounce_ms = debounce_ms
        self._saved_display_ms = saved_display_ms
        self._on_change = on_change

        self._pending: ScheduledTask | None = None
        self._saved_reset: ScheduledTask | None = None
        self._last_saved = ""

        self.content = ""
        self.status = SaveStatus.IDLE
        self.error: str | None = None

    @property
    def last_saved_content(self) -> str:
        return self._last_saved

    @property
    def is_dirty(self) -> bool:
        return self.content != self._last_saved

    @property
    def has_pending_save(self) -> bool:
        return self._pending is not None

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def load(self) -> bool:
        """
        Read the stored note and make it the last-saved content.

        Returns
        -------
        bool
            True on success. On failure ``error`` is set and content stays empty.
        """
        try:
            note = self._store.get_notes()
        except GoalStoreError:
            logger.exception("Failed to load notes")
            self.error = LOAD_FAILED_MESSAGE
            self._notify()
            return False

        self.content = note.content if note is not None else ""
        self._last_saved = self.content
        self.error = None
        self._notify()
        return True

    def edit(self, content: str) -> None:
        """Record new content and restart the debounce timer."""
        self.content = content
        self._cancel_pending()
        self._pending = self._scheduler.call_later(self._debounce_ms, self._on_debounce_elapsed)
        self._notify()

    def save_now(self) -> bool:
        """
        Save immediately, discarding any pending debounce timer.

        Returns
        -------
        bool
            False only when a store write was attempted and failed.
        """
        self._cancel_pending()
        return self._save(self.content)

    def close(self) -> None:
        """Cancel every pending timer. Unsaved content is not written."""
        self._cancel_pending()
        if self._saved_reset is not None:
            self._saved_reset.cancel()
            self._saved_reset = None

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _on_debounce_elapsed(self) -> None:
        self._pending = None
        self._save(self.content)

    def _save(self, content: str) -> bool:
        if content == self._last_saved:
            self.status = SaveStatus.IDLE
            self._notify()
            return True

        self.status = SaveStatus.SAVING
        self._notify()
        try:
            self._store.save_notes(content)
        except GoalStoreError:
            logger.exception("Failed to save notes")
            self.status = SaveStatus.ERROR
            self.error = SAVE_FAILED_MESSAGE
            self._notify()
            return False

        self._last_saved = content
        self.status = SaveStatus.SAVED
        self.error = None
        logger.debug("Saved notes (%d chars)", len(content))

        if self._saved_reset is not None:
            self._saved_reset.cancel()
        self._saved_reset = self._scheduler.call_later(
            self._saved_display_ms, self._on_saved_display_elapsed
        )
        self._notify()
        return True

    def _on_saved_display_elapsed(self) -> None:
        self._saved_reset = None
        if self.status == SaveStatus.SAVED:
            self.status = SaveStatus.IDLE
            self._notify()
