"""
Field validation and normalization for GoalStore.

Both store implementations run these checks before touching storage so that
they reject the same inputs.

Invariants
----------
- Titles are stripped and must not be blank
- Blank descriptions are stored as None
- Targets are integers of at least 1
- Goal and section types belong to the closed GoalType enumeration
"""

from __future__ import annotations

from dataclasses import dataclass

from .api import GoalType
from .errors import InvalidGoalError


@dataclass(frozen=True, slots=True)
class GoalFields:
    """Normalized user-editable goal fields."""

    title: str
    description: str | None
    target_value: int


def normalize_goal_fields(title: str, description: str | None, target_value: int) -> GoalFields:
    """
    Normalize and validate user-editable goal fields.

    Parameters
    ----------
    title:
        Raw title from UI input.
    description:
        Raw description, possibly empty or None.
    target_value:
        Requested target.

    Returns
    -------
    GoalFields
        Normalized fields.

    Raises
    ------
    InvalidGoalError
        If the title is blank or the target is not a positive integer.
    """
    cleaned_title = str(title).strip()
    if not cleaned_title:
        raise InvalidGoalError("Goal title must not be empty.")

    cleaned_description = None
    if description is not None:
        cleaned_description = str(description).strip() or None

    if isinstance(target_value, bool) or not isinstance(target_value, int):
        raise InvalidGoalError(f"Goal target must be an integer, got {target_value!r}.")
    if target_value < 1:
        raise InvalidGoalError(f"Goal target must be at least 1, got {target_value}.")

    return GoalFields(
        title=cleaned_title,
        description=cleaned_description,
        target_value=target_value,
    )


def coerce_goal_type(value: GoalType | str) -> GoalType:
    """
    Return ``value`` as a GoalType.

    Raises
    ------
    InvalidGoalError
        If ``value`` is not one of daily, weekly, monthly or yearly.
    """
    try:
        return GoalType(value)
    except ValueError as exc:
        raise InvalidGoalError(f"Unknown goal type: {value!r}") from exc
