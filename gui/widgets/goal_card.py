"""Card widget for a single goal."""

from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QMenu,
    QProgressBar,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from goal_engine.progress import format_progress, progress_percent
from goal_engine.store.api import Goal


class GoalCard(QFrame):
    """
    Displays one goal with its progress and actions.

    Notes
    -----
    The progress bar is clamped at 100% even when the stored value exceeds the
    target; the text label always shows the stored value.
    """

    increment_requested = Signal(int, int)  # goal_id, amount
    edit_requested = Signal(object)  # Goal
    delete_requested = Signal(int)  # goal_id

    def __init__(self, goal: Goal, increment_amount: int = 1, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._goal = goal
        self._increment_amount = increment_amount

        self.setFrameShape(QFrame.StyledPanel)
        self.setStyleSheet("GoalCard { background: white; border-radius: 6px; }")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 8, 10, 8)

        header = QHBoxLayout()
        title = QLabel(goal.title)
        f = title.font()
        f.setBold(True)
        title.setFont(f)
        title.setWordWrap(True)
        header.addWidget(title, 1)

        menu_btn = QToolButton()
        menu_btn.setText("⋮")
        menu_btn.setToolTip("Goal options")
        menu_btn.setPopupMode(QToolButton.InstantPopup)
        menu = QMenu(menu_btn)
        menu.addAction("Edit", lambda: self.edit_requested.emit(self._goal))
        menu.addAction("Delete", lambda: self.delete_requested.emit(self._goal.id))
        menu_btn.setMenu(menu)
        header.addWidget(menu_btn)
        layout.addLayout(header)

        if goal.description:
            desc = QLabel(goal.description)
            desc.setWordWrap(True)
            desc.setStyleSheet("color: #666;")
            layout.addWidget(desc)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setValue(int(progress_percent(goal.current_value, goal.target_value)))
        self.progress_bar.setTextVisible(False)
        layout.addWidget(self.progress_bar)

        footer = QHBoxLayout()
        footer.addWidget(QLabel(format_progress(goal)), 1)
        btn_increment = QPushButton(f"+{increment_amount}")
        btn_increment.clicked.connect(self._on_increment)
        footer.addWidget(btn_increment)
        layout.addLayout(footer)

    def _on_increment(self) -> None:
        self.increment_requested.emit(self._goal.id, self._increment_amount)
