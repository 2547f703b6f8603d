"""Display helpers for goal progress."""

from __future__ import annotations

from typing import Iterable

from .store.api import Goal, GoalType


def progress_percent(current_value: int, target_value: int) -> float:
    """
    Return progress as a percentage clamped to ``[0, 100]``.

    Stored values are never clamped; only the displayed percentage is.
    A non-positive target yields 0.
    """
    if target_value <= 0:
        return 0.0
    return max(0.0, min(current_value / target_value * 100.0, 100.0))


def format_progress(goal: Goal) -> str:
    """Render ``"<current> / <target> (<pct>%)"`` for a goal card."""
    pct = progress_percent(goal.current_value, goal.target_value)
    return f"{goal.current_value} / {goal.target_value} ({pct:.0f}%)"


def filter_goals_by_type(goals: Iterable[Goal], goal_type: GoalType) -> list[Goal]:
    """Return the goals of one type, preserving order."""
    return [g for g in goals if g.goal_type == goal_type]
