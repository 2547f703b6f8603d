"""Domain exceptions for GoalStore implementations."""

from __future__ import annotations

from ..errors import GoalTrackerError


class GoalStoreError(GoalTrackerError):
    """Base error for goal store operations."""


class StorageError(GoalStoreError):
    """Raised when the underlying storage backend fails."""


class InvalidGoalError(GoalStoreError):
    """Raised when goal fields violate invariants."""
