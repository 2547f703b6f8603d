"""Collapsible section listing the goals of one type."""

from __future__ import annotations

from typing import Sequence

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from goal_engine.store.api import Goal, GoalType
from gui.widgets.goal_card import GoalCard

SECTION_COLORS: dict[GoalType, str] = {
    GoalType.DAILY: "#eff6ff",
    GoalType.WEEKLY: "#f0fdf4",
    GoalType.MONTHLY: "#fefce8",
    GoalType.YEARLY: "#faf5ff",
}


class GoalSection(QGroupBox):
    """
    Section for one GoalType.

    Responsibilities
    ----------------
    - Render a GoalCard per goal, in the order given.
    - Forward card actions and the "add goal" request to the window.
    """

    add_requested = Signal(object)  # GoalType
    increment_requested = Signal(int, int)  # goal_id, amount
    edit_requested = Signal(object)  # Goal
    delete_requested = Signal(int)  # goal_id

    def __init__(
        self,
        goal_type: GoalType,
        *,
        increment_amount: int = 1,
        expanded: bool = True,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(f"{goal_type.value.capitalize()} Goals", parent)
        self._goal_type = goal_type
        self._increment_amount = increment_amount
        self.setStyleSheet(f"QGroupBox {{ background: {SECTION_COLORS[goal_type]}; }}")

        layout = QVBoxLayout(self)

        header = QHBoxLayout()
        self.count_label = QLabel("0 goals")
        self.count_label.setStyleSheet("color: #666;")
        header.addWidget(self.count_label, 1)

        self.toggle_btn = QToolButton()
        self.toggle_btn.setCheckable(True)
        self.toggle_btn.setChecked(expanded)
        self.toggle_btn.toggled.connect(self._on_toggled)
        header.addWidget(self.toggle_btn)

        btn_add = QPushButton("Add Goal")
        btn_add.clicked.connect(lambda: self.add_requested.emit(self._goal_type))
        header.addWidget(btn_add)
        layout.addLayout(header)

        self._body = QWidget()
        self._cards_layout = QVBoxLayout(self._body)
        self._cards_layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._body)
        layout.addStretch(1)

        self._on_toggled(expanded)

    @property
    def goal_type(self) -> GoalType:
        return self._goal_type

    def set_goals(self, goals: Sequence[Goal]) -> None:
        """Replace the rendered cards with ``goals``."""
        while self._cards_layout.count():
            item = self._cards_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        if not goals:
            empty = QLabel(f"No {self._goal_type.value} goals yet.")
            empty.setStyleSheet("color: #999;")
            self._cards_layout.addWidget(empty)

        for goal in goals:
            card = GoalCard(goal, increment_amount=self._increment_amount)
            card.increment_requested.connect(self.increment_requested)
            card.edit_requested.connect(self.edit_requested)
            card.delete_requested.connect(self.delete_requested)
            self._cards_layout.addWidget(card)

        self.count_label.setText(f"{len(goals)} goal{'s' if len(goals) != 1 else ''}")

    def _on_toggled(self, expanded: bool) -> None:
        self._body.setVisible(expanded)
        self.toggle_btn.setText("▾" if expanded else "▸")
