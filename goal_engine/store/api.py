"""
GoalStore public API.

This module defines the persistence surface the rest of the application is
allowed to call. Callers speak only in the typed records below and never
depend on which backend is active.

Notes
-----
- Every list query filters on ``is_active``; soft-deleted goals are only
  reachable through ``get_goal``.
- ``current_value`` is never clamped by a store. Display code clamps progress.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Sequence

GoalId = int


class GoalType(str, Enum):
    """Period classification of a goal (also used as a layout section)."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True, slots=True)
class Goal:
    """
    A trackable target with a period classification and a progress counter.

    Attributes
    ----------
    id:
        Identifier assigned by storage.
    title:
        Display title (non-blank).
    description:
        Optional free text.
    target_value:
        Positive target for ``current_value``.
    current_value:
        Progress counter. May exceed ``target_value``.
    goal_type:
        Period classification.
    is_active:
        False once the goal has been soft-deleted.
    created_at, updated_at:
        Storage timestamps, ``YYYY-MM-DD HH:MM:SS`` in UTC.
    """

    id: GoalId
    title: str
    description: str | None
    target_value: int
    current_value: int
    goal_type: GoalType
    is_active: bool
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True, slots=True)
class ChecklistItem:
    """A checklist entry belonging to one goal, ordered by ``order_index``."""

    id: int
    goal_id: GoalId
    title: str
    is_completed: bool
    order_index: int
    created_at: str | None = None


@dataclass(frozen=True, slots=True)
class LayoutItem:
    """Position and size metadata for one goal's card."""

    id: int
    goal_id: GoalId
    x_position: float
    y_position: float
    width: float
    height: float
    section_type: GoalType
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True, slots=True)
class Note:
    """The singleton freeform note."""

    id: int
    content: str
    created_at: str | None = None
    updated_at: str | None = None


NOTE_SINGLETON_ID = 1


class GoalStore(Protocol):
    """
    Storage capability interface.

    Implementations raise ``StorageError`` for backend failures and
    ``InvalidGoalError`` for field invariant violations. Updates and deletes
    that match no row are silent no-ops.
    """

    # Goals

    def add_goal(
        self,
        title: str,
        description: str | None,
        target_value: int,
        goal_type: GoalType,
    ) -> GoalId:
        """
        Insert a new active goal with ``current_value = 0``.

        Returns
        -------
        GoalId
            Identifier assigned by storage.

        Raises
        ------
        InvalidGoalError
            If title is blank, target_value is below 1 or goal_type is unknown.
        """
        raise NotImplementedError

    def get_goals(self) -> Sequence[Goal]:
        """Return active goals, newest first."""
        raise NotImplementedError

    def get_goal(self, goal_id: GoalId) -> Goal | None:
        """Return a goal by id regardless of ``is_active``, or None."""
        raise NotImplementedError

    def increment_goal(self, goal_id: GoalId, amount: int) -> None:
        """Add ``amount`` to ``current_value`` without any upper bound."""
        raise NotImplementedError

    def update_goal(
        self,
        goal_id: GoalId,
        title: str,
        description: str | None,
        target_value: int,
    ) -> None:
        """Replace a goal's title, description and target."""
        raise NotImplementedError

    def delete_goal(self, goal_id: GoalId) -> None:
        """Soft delete a goal by clearing ``is_active``."""
        raise NotImplementedError

    def reset_daily_goals(self) -> None:
        """Set ``current_value = 0`` on every active daily goal."""
        raise NotImplementedError

    # Checklist items

    def add_checklist_item(self, goal_id: GoalId, title: str, order_index: int) -> int:
        raise NotImplementedError

    def get_checklist_items(self, goal_id: GoalId) -> Sequence[ChecklistItem]:
        raise NotImplementedError

    def toggle_checklist_item(self, item_id: int, is_completed: bool) -> None:
        raise NotImplementedError

    def delete_checklist_item(self, item_id: int) -> None:
        raise NotImplementedError

    # Layout

    def save_layout(
        self,
        goal_id: GoalId,
        x_position: float,
        y_position: float,
        width: float,
        height: float,
        section_type: GoalType,
    ) -> None:
        """Insert or replace the single layout row for ``goal_id``."""
        raise NotImplementedError

    def get_layout(self) -> Sequence[LayoutItem]:
        raise NotImplementedError

    # Notes

    def save_notes(self, content: str) -> None:
        """Replace the singleton note."""
        raise NotImplementedError

    def get_notes(self) -> Note | None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError
