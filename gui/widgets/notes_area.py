"""
Notes area widget.

Typing schedules a debounced save through NoteAutosaver; Ctrl+S and the Save
button save immediately.
"""

from __future__ import annotations

from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from goal_engine.notes_autosave import NoteAutosaver, SaveStatus
from goal_engine.store.api import GoalStore
from gui.qt_scheduler import QtScheduler

STATUS_TEXT: dict[SaveStatus, tuple[str, str]] = {
    SaveStatus.IDLE: ("", "#666"),
    SaveStatus.SAVING: ("Saving…", "#666"),
    SaveStatus.SAVED: ("Saved", "#15803d"),
    SaveStatus.ERROR: ("Error", "#b00020"),
}


class NotesArea(QGroupBox):
    """
    Freeform notes backed by the notes singleton.

    Responsibilities
    ----------------
    - Load the stored note once on construction.
    - Route edits to the autosaver and render its status.
    - Flush unsaved edits and cancel pending timers on shutdown.
    """

    def __init__(
        self,
        store: GoalStore,
        *,
        debounce_ms: int,
        saved_display_ms: int,
        placeholder: str = "Add your notes here...",
        parent: QWidget | None = None,
    ) -> None:
        super().__init__("Notes", parent)

        self._autosaver = NoteAutosaver(
            store,
            QtScheduler(self),
            debounce_ms=debounce_ms,
            saved_display_ms=saved_display_ms,
            on_change=self._refresh_status,
        )

        layout = QVBoxLayout(self)

        header = QHBoxLayout()
        self.status_label = QLabel("")
        header.addWidget(self.status_label, 1)

        self.btn_save = QPushButton("Save")
        self.btn_save.setToolTip("Save notes (Ctrl+S)")
        self.btn_save.clicked.connect(lambda: self._autosaver.save_now())
        header.addWidget(self.btn_save)
        layout.addLayout(header)

        self.editor = QPlainTextEdit()
        self.editor.setPlaceholderText(placeholder)
        layout.addWidget(self.editor, 1)

        self.error_label = QLabel("")
        self.error_label.setStyleSheet("color: #b00020;")
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

        QShortcut(QKeySequence.Save, self.editor, activated=lambda: self._autosaver.save_now())

        self._autosaver.load()
        self.editor.setPlainText(self._autosaver.content)
        self.editor.textChanged.connect(self._on_text_changed)
        self._refresh_status()

    def _on_text_changed(self) -> None:
        self._autosaver.edit(self.editor.toPlainText())

    def _refresh_status(self) -> None:
        text, color = STATUS_TEXT[self._autosaver.status]
        self.status_label.setText(text)
        self.status_label.setStyleSheet(f"color: {color};")

        error = self._autosaver.error
        self.error_label.setText(error or "")
        self.error_label.setVisible(error is not None)

        saving = self._autosaver.status == SaveStatus.SAVING
        self.btn_save.setEnabled(not saving and self._autosaver.is_dirty)

    def shutdown(self) -> None:
        """Save unsaved edits once, then cancel all timers."""
        if self._autosaver.is_dirty:
            self._autosaver.save_now()
        self._autosaver.close()
