"""
GoalTracker GUI app.

Single window backed by the goal board controller and the notes autosaver.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QDialog,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from goal_engine.board import AddGoalForm, EditGoalForm, GoalBoardController
from goal_engine.health import initialize_store
from goal_engine.logging_setup import configure_logging
from goal_engine.paths import AppPaths, resolve_app_paths
from goal_engine.settings_store import AppSettings, load_settings
from goal_engine.store.api import Goal, GoalStore, GoalType
from goal_engine.store.selection import open_goal_store
from gui.dialogs.goal_dialog import GoalDialog
from gui.widgets.goal_section import GoalSection
from gui.widgets.notes_area import NotesArea

logger = logging.getLogger(__name__)

PAGE_LOADING = 0
PAGE_LOAD_ERROR = 1
PAGE_BOARD = 2


class ErrorBanner(QFrame):
    """Dismissible banner showing the controller's current error."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setStyleSheet(
            "ErrorBanner { background: #fef2f2; border-left: 4px solid #f87171; }"
        )
        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)

        self.message_label = QLabel("")
        self.message_label.setStyleSheet("color: #b91c1c;")
        self.message_label.setWordWrap(True)
        layout.addWidget(self.message_label, 1)

        self.btn_dismiss = QPushButton("Dismiss")
        layout.addWidget(self.btn_dismiss)

    def show_message(self, message: str | None) -> None:
        self.message_label.setText(message or "")
        self.setVisible(message is not None)


class AppWindow(QWidget):
    """
    Main window for the GoalTracker GUI.

    Responsibilities
    ----------------
    - Render the goal board from GoalBoardController state
    - Route dialogs through the controller's dialog states
    - Show the full-page error when the initial load fails
    - Coordinate clean shutdown of the notes autosaver
    """

    def __init__(self, store: GoalStore, settings: AppSettings) -> None:
        super().__init__()
        self.setWindowTitle("GoalTracker")
        self.resize(1180, 760)

        self._settings = settings
        self._controller = GoalBoardController(store)

        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)

        header = QWidget()
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(8, 8, 8, 8)

        title = QLabel("GoalTracker")
        f = title.font()
        f.setPointSize(16)
        f.setBold(True)
        title.setFont(f)

        subtitle = QLabel("Track your daily, weekly, monthly, and yearly goals")
        subtitle.setStyleSheet("color: #666;")

        self.count_label = QLabel("")
        self.count_label.setStyleSheet("color: #666;")

        btn_reset = QPushButton("Reset Daily")
        btn_reset.setToolTip("Set progress of every daily goal back to 0")
        btn_reset.clicked.connect(self._on_reset_daily)

        header_layout.addWidget(title)
        header_layout.addSpacing(10)
        header_layout.addWidget(subtitle)
        header_layout.addStretch(1)
        header_layout.addWidget(self.count_label)
        header_layout.addWidget(btn_reset)
        root.addWidget(header)

        self.banner = ErrorBanner()
        self.banner.btn_dismiss.clicked.connect(self._on_dismiss_error)
        self.banner.setVisible(False)
        root.addWidget(self.banner)

        self.pages = QStackedWidget()
        self.pages.addWidget(self._build_loading_page())
        self.pages.addWidget(self._build_load_error_page())
        self.pages.addWidget(self._build_board_page(store))
        root.addWidget(self.pages, 1)

        self._load()

    # Pages

    def _build_loading_page(self) -> QWidget:
        label = QLabel("Loading your goals...")
        label.setAlignment(Qt.AlignCenter)
        return label

    def _build_load_error_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.addStretch(1)

        self.load_error_label = QLabel("")
        self.load_error_label.setAlignment(Qt.AlignCenter)
        self.load_error_label.setStyleSheet("color: #b91c1c; font-size: 14pt;")
        layout.addWidget(self.load_error_label)

        btn_retry = QPushButton("Retry")
        btn_retry.clicked.connect(self._load)
        row = QHBoxLayout()
        row.addStretch(1)
        row.addWidget(btn_retry)
        row.addStretch(1)
        layout.addLayout(row)

        layout.addStretch(1)
        return page

    def _build_board_page(self, store: GoalStore) -> QWidget:
        page = QWidget()
        layout = QHBoxLayout(page)

        grid_host = QWidget()
        grid = QGridLayout(grid_host)
        self.sections: dict[GoalType, GoalSection] = {}
        for index, goal_type in enumerate(GoalType):
            section = GoalSection(goal_type, increment_amount=self._settings.increment_amount)
            section.add_requested.connect(self._on_add_requested)
            section.increment_requested.connect(self._on_increment)
            section.edit_requested.connect(self._on_edit_requested)
            section.delete_requested.connect(self._on_delete_requested)
            grid.addWidget(section, index // 2, index % 2)
            self.sections[goal_type] = section

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(grid_host)
        layout.addWidget(scroll, 3)

        self.notes_area = NotesArea(
            store,
            debounce_ms=self._settings.debounce_ms,
            saved_display_ms=self._settings.saved_display_ms,
        )
        layout.addWidget(self.notes_area, 1)
        return page

    # Rendering

    def _render(self) -> None:
        c = self._controller
        if c.load_error is not None:
            self.load_error_label.setText(c.load_error)
            self.pages.setCurrentIndex(PAGE_LOAD_ERROR)
        else:
            self.pages.setCurrentIndex(PAGE_BOARD)
            for goal_type, section in self.sections.items():
                section.set_goals(c.goals_of_type(goal_type))

        self.count_label.setText(f"{c.active_goal_count} active goals")
        self.banner.show_message(c.error)

    def _load(self) -> None:
        self.pages.setCurrentIndex(PAGE_LOADING)
        QApplication.processEvents()
        self._controller.load()
        self._render()

    # Handlers

    def _on_dismiss_error(self) -> None:
        self._controller.dismiss_error()
        self._render()

    def _on_increment(self, goal_id: int, amount: int) -> None:
        self._controller.increment(goal_id, amount)
        self._render()

    def _on_reset_daily(self) -> None:
        answer = QMessageBox.question(
            self,
            "Reset daily goals",
            "Set the progress of every daily goal back to 0?",
        )
        if answer != QMessageBox.Yes:
            return
        self._controller.reset_daily_goals()
        self._render()

    def _on_add_requested(self, goal_type: GoalType) -> None:
        self._controller.open_add(goal_type)
        dialog = GoalDialog(self, window_title="Add Goal", goal_type=goal_type)
        while True:
            if dialog.exec() != QDialog.Accepted:
                self._controller.cancel_add()
                break
            value = dialog.result_value()
            form = AddGoalForm(
                title=value.title,
                description=value.description,
                target_value=value.target_value,
                goal_type=goal_type,
            )
            if self._controller.submit_add(form) is not None:
                break
            self._render()
        self._render()

    def _on_edit_requested(self, goal: Goal) -> None:
        self._controller.open_edit(goal)
        form = self._controller.edit_dialog.form
        assert form is not None
        dialog = GoalDialog(
            self,
            window_title="Edit Goal",
            goal_type=goal.goal_type,
            title=form.title,
            description=form.description,
            target_value=form.target_value,
        )
        while True:
            if dialog.exec() != QDialog.Accepted:
                self._controller.cancel_edit()
                break
            value = dialog.result_value()
            submitted = EditGoalForm(
                id=form.id,
                title=value.title,
                description=value.description,
                target_value=value.target_value,
            )
            if self._controller.submit_edit(submitted):
                break
            self._render()
        self._render()

    def _on_delete_requested(self, goal_id: int) -> None:
        self._controller.request_delete(goal_id)
        title = self._controller.delete_dialog.goal_title
        answer = QMessageBox.question(
            self,
            "Delete Goal",
            f'Are you sure you want to delete "{title}"? This action cannot be undone.',
        )
        if answer == QMessageBox.Yes:
            self._controller.confirm_delete()
        else:
            self._controller.cancel_delete()
        self._render()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """
        Handle window close by flushing notes and cancelling their timers.

        Parameters
        ----------
        event:
            Qt close event.
        """
        try:
            if hasattr(self, "notes_area"):
                self.notes_area.shutdown()
        finally:
            super().closeEvent(event)


def main(data_root: Path | None = None) -> int:
    """
    Run the GoalTracker GUI application.

    Parameters
    ----------
    data_root:
        Optional override for the data root.

    Returns
    -------
    int
        Qt application exit code.
    """
    paths: AppPaths = resolve_app_paths(data_root)
    settings = load_settings(paths.settings_path)
    configure_logging(paths.logs_root, settings.log_level)

    store = open_goal_store(paths, backend=settings.storage_backend)
    initialize_store(store)

    app = QApplication.instance() or QApplication(sys.argv)
    try:
        w = AppWindow(store, settings)
        w.show()
        logger.info("GoalTracker window shown (data root: %s)", paths.data_root)
        return app.exec()
    finally:
        store.close()


if __name__ == "__main__":
    raise SystemExit(main())
