"""
Start-up verification and health checks for a GoalStore.

Notes
-----
These checks only read. They touch every table so that a missing table or an
unreadable file shows up before the user starts editing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .store.api import GoalStore
from .store.errors import GoalStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HealthReport:
    """
    Result of ``health_check``.

    Attributes
    ----------
    status:
        ``"healthy"`` when every probe passed, otherwise ``"error"``.
    details:
        Per-table probe outcome.
    errors:
        One message per failed probe.
    """

    status: str
    details: dict[str, bool] = field(default_factory=dict)
    errors: tuple[str, ...] = ()

    @property
    def healthy(self) -> bool:
        return self.status == "healthy"


def initialize_store(store: GoalStore) -> bool:
    """
    Verify the store answers reads on goals, layout and notes.

    Returns
    -------
    bool
        True on success. Failures are logged, not raised.
    """
    try:
        store.get_goals()
        store.get_layout()
        store.get_notes()
    except GoalStoreError:
        logger.exception("Goal store initialization failed")
        return False
    logger.info("Goal store initialized")
    return True


def health_check(store: GoalStore) -> HealthReport:
    """
    Probe each table independently and collect the results.

    Parameters
    ----------
    store:
        Store to check.

    Returns
    -------
    HealthReport
        Per-table outcome and error messages.
    """
    probes = {
        "goals": store.get_goals,
        "layout": store.get_layout,
        "notes": store.get_notes,
        # No goal has id -1, so this only proves the table is readable.
        "checklist": lambda: store.get_checklist_items(-1),
    }

    details: dict[str, bool] = {}
    errors: list[str] = []
    for name, probe in probes.items():
        try:
            probe()
        except GoalStoreError as exc:
            details[name] = False
            errors.append(f"{name.capitalize()} table error: {exc}")
            logger.warning("Health probe %s failed: %s", name, exc)
        else:
            details[name] = True

    status = "healthy" if all(details.values()) else "error"
    return HealthReport(status=status, details=details, errors=tuple(errors))
