"""
Add/Edit goal dialog (UI only).

Notes
-----
- Field validation runs through engine goal normalization, so the dialog
  rejects exactly what the store would reject.
- The goal type is chosen by the section that opened the dialog and is shown
  read-only; editing never changes a goal's type.
"""

from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from goal_engine.store.api import GoalType
from goal_engine.store.errors import InvalidGoalError
from goal_engine.store.rules import normalize_goal_fields

MAX_TARGET_VALUE = 1_000_000


@dataclass(frozen=True, slots=True)
class GoalDialogResult:
    """
    Values accepted by GoalDialog.

    Attributes
    ----------
    title:
        Raw title text.
    description:
        Raw description text (may be empty).
    target_value:
        Target chosen in the spin box.
    """

    title: str
    description: str
    target_value: int


class GoalDialog(QDialog):
    """
    Dialog for adding a goal or editing an existing one.

    Parameters
    ----------
    parent:
        Owning widget.
    window_title:
        Dialog caption ("Add Goal" / "Edit Goal").
    goal_type:
        Section the goal belongs to.
    title, description, target_value:
        Initial field values.
    """

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        window_title: str,
        goal_type: GoalType,
        title: str = "",
        description: str = "",
        target_value: int = 1,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle(window_title)
        self.setModal(True)
        self.resize(420, 280)

        layout = QVBoxLayout(self)

        form = QFormLayout()
        form.addRow("Type:", QLabel(goal_type.value.capitalize()))

        self.title_edit = QLineEdit(title)
        self.title_edit.setPlaceholderText("e.g. Read")
        form.addRow("Title:", self.title_edit)

        self.description_edit = QPlainTextEdit(description)
        self.description_edit.setPlaceholderText("Optional")
        self.description_edit.setFixedHeight(80)
        form.addRow("Description:", self.description_edit)

        self.target_spin = QSpinBox()
        self.target_spin.setRange(1, MAX_TARGET_VALUE)
        self.target_spin.setValue(max(1, target_value))
        form.addRow("Target:", self.target_spin)

        layout.addLayout(form)

        self.validation_label = QLabel("")
        self.validation_label.setStyleSheet("color: #b00020;")
        self.validation_label.setWordWrap(True)
        layout.addWidget(self.validation_label)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        self.title_edit.setFocus()

    def result_value(self) -> GoalDialogResult:
        return GoalDialogResult(
            title=self.title_edit.text(),
            description=self.description_edit.toPlainText(),
            target_value=int(self.target_spin.value()),
        )

    def _on_accept(self) -> None:
        value = self.result_value()
        try:
            normalize_goal_fields(value.title, value.description, value.target_value)
        except InvalidGoalError as exc:
            self.validation_label.setText(str(exc))
            return
        self.accept()
