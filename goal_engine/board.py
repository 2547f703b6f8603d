"""
View state for the goal board.

The controller owns the in-memory goal list the UI renders. Every mutating
action calls the store first; only on success is the list patched so that it
matches what a fresh ``get_goals`` would return. On failure the list is left
untouched and ``error`` carries a short message for the banner.

State
-----
- ``phase``: LOADING until the first ``load`` finishes, then READY for good.
- ``error``: banner message, set and cleared independently of everything else.
- ``load_error``: full-page error when the initial load failed.
- Three dialog states (delete, edit, add), each opened and closed on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from .clock import Clock, SystemClock, format_timestamp
from .errors import NoGoalSelectedError
from .progress import filter_goals_by_type
from .store.api import Goal, GoalId, GoalStore, GoalType
from .store.errors import GoalStoreError, InvalidGoalError
from .store.rules import GoalFields, coerce_goal_type, normalize_goal_fields

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load goals from database"
INCREMENT_FAILED_MESSAGE = "Failed to update goal progress"
UPDATE_FAILED_MESSAGE = "Failed to update goal"
ADD_FAILED_MESSAGE = "Failed to add new goal"
RESET_FAILED_MESSAGE = "Failed to reset daily goals"
NO_GOAL_SELECTED_MESSAGE = "No goal selected for deletion"


class ViewPhase(str, Enum):
    """Board lifecycle phase."""

    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True, slots=True)
class EditGoalForm:
    """Values shown in the edit dialog."""

    id: GoalId
    title: str
    description: str
    target_value: int


@dataclass(frozen=True, slots=True)
class AddGoalForm:
    """Values entered in the add dialog."""

    title: str = ""
    description: str = ""
    target_value: int = 1
    goal_type: GoalType = GoalType.DAILY


@dataclass(frozen=True, slots=True)
class DeleteDialogState:
    is_open: bool = False
    goal_id: GoalId | None = None
    goal_title: str | None = None


@dataclass(frozen=True, slots=True)
class EditDialogState:
    is_open: bool = False
    form: EditGoalForm | None = None


@dataclass(frozen=True, slots=True)
class AddDialogState:
    is_open: bool = False
    goal_type: GoalType | None = None


class GoalBoardController:
    """
    In-memory goal list kept consistent with a GoalStore.

    Parameters
    ----------
    store:
        Persistence backend. Every call is issued synchronously, one at a time.
    clock:
        Source of timestamps for locally patched records.
    """

    def __init__(self, store: GoalStore, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()

        self.phase = ViewPhase.LOADING
        self.goals: list[Goal] = []
        self.error: str | None = None
        self.load_error: str | None = None

        self.delete_dialog = DeleteDialogState()
        self.edit_dialog = EditDialogState()
        self.add_dialog = AddDialogState()

    # Queries

    @property
    def active_goal_count(self) -> int:
        return len(self.goals)

    def goals_of_type(self, goal_type: GoalType) -> list[Goal]:
        """Return loaded goals of one type in display order."""
        return filter_goals_by_type(self.goals, goal_type)

    def find_goal(self, goal_id: GoalId) -> Goal | None:
        for goal in self.goals:
            if goal.id == goal_id:
                return goal
        return None

    # Loading

    def load(self) -> bool:
        """
        Load active goals from the store.

        Returns
        -------
        bool
            True on success. On failure ``load_error`` is set and the previous
            list is kept.
        """
        self.error = None
        self.load_error = None
        try:
            goals = list(self._store.get_goals())
        except GoalStoreError:
            logger.exception("Failed to load goals")
            self.load_error = LOAD_FAILED_MESSAGE
            return False
        finally:
            self.phase = ViewPhase.READY

        self.goals = goals
        logger.info("Loaded %d active goal(s)", len(goals))
        return True

    # Progress

    def increment(self, goal_id: GoalId, amount: int = 1) -> bool:
        """Add ``amount`` to a goal's progress."""
        try:
            self._store.increment_goal(goal_id, amount)
        except GoalStoreError:
            logger.exception("Failed to increment goal %s by %s", goal_id, amount)
            self.error = INCREMENT_FAILED_MESSAGE
            return False

        now = format_timestamp(self._clock)
        self.goals = [
            replace(g, current_value=g.current_value + amount, updated_at=now)
            if g.id == goal_id
            else g
            for g in self.goals
        ]
        return True

    def reset_daily_goals(self) -> bool:
        """Zero the progress of every active daily goal."""
        try:
            self._store.reset_daily_goals()
        except GoalStoreError:
            logger.exception("Failed to reset daily goals")
            self.error = RESET_FAILED_MESSAGE
            return False

        now = format_timestamp(self._clock)
        self.goals = [
            replace(g, current_value=0, updated_at=now) if g.goal_type == GoalType.DAILY else g
            for g in self.goals
        ]
        return True

    # Edit dialog

    def open_edit(self, goal: Goal) -> None:
        self.edit_dialog = EditDialogState(
            is_open=True,
            form=EditGoalForm(
                id=goal.id,
                title=goal.title,
                description=goal.description or "",
                target_value=goal.target_value,
            ),
        )

    def cancel_edit(self) -> None:
        self.edit_dialog = EditDialogState()

    def submit_edit(self, form: EditGoalForm) -> bool:
        """
        Persist edited fields and patch the goal in place.

        Invalid input is rejected locally and the dialog stays open.
        """
        fields = self._validated_fields(form.title, form.description, form.target_value)
        if fields is None:
            return False

        try:
            self._store.update_goal(form.id, fields.title, fields.description, fields.target_value)
        except GoalStoreError:
            logger.exception("Failed to update goal %s", form.id)
            self.error = UPDATE_FAILED_MESSAGE
            return False

        now = format_timestamp(self._clock)
        self.goals = [
            replace(
                g,
                title=fields.title,
                description=fields.description,
                target_value=fields.target_value,
                updated_at=now,
            )
            if g.id == form.id
            else g
            for g in self.goals
        ]
        self.edit_dialog = EditDialogState()
        return True

    # Delete dialog

    def request_delete(self, goal_id: GoalId) -> None:
        goal = self.find_goal(goal_id)
        self.delete_dialog = DeleteDialogState(
            is_open=True,
            goal_id=goal_id,
            goal_title=goal.title if goal is not None else "Unknown Goal",
        )

    def cancel_delete(self) -> None:
        self.delete_dialog = DeleteDialogState()

    def _selected_goal_id(self) -> GoalId:
        goal_id = self.delete_dialog.goal_id
        if goal_id is None:
            raise NoGoalSelectedError(NO_GOAL_SELECTED_MESSAGE)
        return goal_id

    def confirm_delete(self) -> bool:
        """
        Soft delete the goal selected by ``request_delete``.

        Fails without touching the store when no goal is selected.
        """
        try:
            goal_id = self._selected_goal_id()
        except NoGoalSelectedError as exc:
            logger.error("Delete attempted with no goal selected")
            self.error = str(exc)
            return False

        try:
            self._store.delete_goal(goal_id)
        except GoalStoreError as exc:
            logger.exception("Failed to delete goal %s", goal_id)
            self.error = f"Failed to delete goal: {exc}"
            return False

        self.goals = [g for g in self.goals if g.id != goal_id]
        self.delete_dialog = DeleteDialogState()
        logger.info("Deleted goal %s; %d active goal(s) remain", goal_id, len(self.goals))
        return True

    # Add dialog

    def open_add(self, goal_type: GoalType) -> None:
        self.add_dialog = AddDialogState(is_open=True, goal_type=goal_type)

    def cancel_add(self) -> None:
        self.add_dialog = AddDialogState()

    def submit_add(self, form: AddGoalForm) -> GoalId | None:
        """
        Create a goal and prepend it to the list.

        Returns
        -------
        GoalId | None
            The new goal's id, or None when validation or storage failed.
        """
        fields = self._validated_fields(form.title, form.description, form.target_value)
        if fields is None:
            return None
        try:
            goal_type = coerce_goal_type(form.goal_type)
        except InvalidGoalError as exc:
            self.error = str(exc)
            return None

        try:
            goal_id = self._store.add_goal(
                fields.title, fields.description, fields.target_value, goal_type
            )
        except GoalStoreError:
            logger.exception("Failed to add goal %r", fields.title)
            self.error = ADD_FAILED_MESSAGE
            return None

        now = format_timestamp(self._clock)
        new_goal = Goal(
            id=goal_id,
            title=fields.title,
            description=fields.description,
            target_value=fields.target_value,
            current_value=0,
            goal_type=goal_type,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self.goals = [new_goal, *self.goals]
        self.add_dialog = AddDialogState()
        return goal_id

    # Errors

    def dismiss_error(self) -> None:
        self.error = None

    def _validated_fields(
        self, title: str, description: str | None, target_value: int
    ) -> GoalFields | None:
        try:
            return normalize_goal_fields(title, description, target_value)
        except InvalidGoalError as exc:
            logger.info("Rejected goal input: %s", exc)
            self.error = str(exc)
            return None
