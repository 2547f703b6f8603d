"""
Domain exceptions for GoalTracker.

Notes
-----
Engine code raises domain exceptions for every expected failure mode. Callers
at the UI boundary convert them into short user-facing messages.
"""

from __future__ import annotations


class GoalTrackerError(RuntimeError):
    """Base exception for all GoalTracker domain failures."""


class NoGoalSelectedError(GoalTrackerError):
    """Raised when an action needs a selected goal and none is selected."""


class DataRootError(GoalTrackerError):
    """Raised when the application data root cannot be resolved."""
