from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import pytest

from goal_engine.board import (
    ADD_FAILED_MESSAGE,
    INCREMENT_FAILED_MESSAGE,
    LOAD_FAILED_MESSAGE,
    NO_GOAL_SELECTED_MESSAGE,
    UPDATE_FAILED_MESSAGE,
    AddGoalForm,
    EditGoalForm,
    GoalBoardController,
    ViewPhase,
)
from goal_engine.clock import FixedClock
from goal_engine.progress import format_progress
from goal_engine.store.api import Goal, GoalStore, GoalType
from goal_engine.store.errors import StorageError
from goal_engine.store.key_value import MemoryStorage
from goal_engine.store.kv_store import KeyValueGoalStore


@dataclass
class FlakyStore:
    """Wraps a real store; named operations raise StorageError instead."""

    inner: GoalStore
    failing: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    def __getattr__(self, name: str):
        attr = getattr(self.inner, name)

        def wrapper(*args, **kwargs):
            self.calls.append(name)
            if name in self.failing:
                raise StorageError(f"{name} exploded")
            return attr(*args, **kwargs)

        return wrapper


@pytest.fixture
def backing(fixed_clock: FixedClock) -> KeyValueGoalStore:
    return KeyValueGoalStore(storage=MemoryStorage(), clock=fixed_clock)


@pytest.fixture
def flaky(backing: KeyValueGoalStore) -> FlakyStore:
    return FlakyStore(inner=backing)


@pytest.fixture
def board(flaky: FlakyStore, fixed_clock: FixedClock) -> GoalBoardController:
    return GoalBoardController(flaky, clock=fixed_clock)  # type: ignore[arg-type]


def _fresh(store: GoalStore) -> Sequence[Goal]:
    return list(store.get_goals())


def test_load_moves_to_ready_with_goals(backing: KeyValueGoalStore, board: GoalBoardController) -> None:
    backing.add_goal("Read", None, 10, GoalType.DAILY)
    assert board.phase is ViewPhase.LOADING

    assert board.load() is True

    assert board.phase is ViewPhase.READY
    assert [g.title for g in board.goals] == ["Read"]
    assert board.load_error is None


def test_load_failure_sets_full_page_error(flaky: FlakyStore, board: GoalBoardController) -> None:
    flaky.failing.add("get_goals")

    assert board.load() is False

    assert board.phase is ViewPhase.READY
    assert board.load_error == LOAD_FAILED_MESSAGE
    assert board.error is None
    assert board.goals == []

    flaky.failing.clear()
    assert board.load() is True
    assert board.load_error is None


def test_add_prepends_goal_matching_fresh_read(
    backing: KeyValueGoalStore, board: GoalBoardController
) -> None:
    backing.add_goal("Existing", None, 5, GoalType.WEEKLY)
    board.load()
    board.open_add(GoalType.DAILY)
    assert board.add_dialog.is_open
    assert board.add_dialog.goal_type is GoalType.DAILY

    goal_id = board.submit_add(
        AddGoalForm(title=" Read ", description="", target_value=10, goal_type=GoalType.DAILY)
    )

    assert goal_id is not None
    assert board.add_dialog.is_open is False
    assert board.goals == _fresh(backing)
    assert board.goals[0].current_value == 0
    assert board.goals[0].is_active is True


def test_add_with_blank_title_never_reaches_store(flaky: FlakyStore, board: GoalBoardController) -> None:
    board.load()
    board.open_add(GoalType.DAILY)

    assert board.submit_add(AddGoalForm(title="   ", target_value=3)) is None

    assert "add_goal" not in flaky.calls
    assert board.error is not None
    assert board.add_dialog.is_open is True


def test_add_failure_keeps_state_and_dialog(flaky: FlakyStore, board: GoalBoardController) -> None:
    board.load()
    board.open_add(GoalType.WEEKLY)
    flaky.failing.add("add_goal")

    assert board.submit_add(AddGoalForm(title="Run", target_value=3, goal_type=GoalType.WEEKLY)) is None

    assert board.error == ADD_FAILED_MESSAGE
    assert board.goals == []
    assert board.add_dialog.is_open is True


def test_increment_patches_goal_like_fresh_read(
    backing: KeyValueGoalStore, board: GoalBoardController
) -> None:
    goal_id = backing.add_goal("Read", None, 10, GoalType.DAILY)
    backing.add_goal("Other", None, 10, GoalType.DAILY)
    board.load()

    assert board.increment(goal_id, 3) is True

    assert board.goals == _fresh(backing)


def test_increment_failure_leaves_goals_untouched(
    backing: KeyValueGoalStore, flaky: FlakyStore, board: GoalBoardController
) -> None:
    goal_id = backing.add_goal("Read", None, 10, GoalType.DAILY)
    board.load()
    before = list(board.goals)
    flaky.failing.add("increment_goal")

    assert board.increment(goal_id) is False

    assert board.goals == before
    assert board.error == INCREMENT_FAILED_MESSAGE

    board.dismiss_error()
    assert board.error is None


def test_edit_flow_patches_fields(backing: KeyValueGoalStore, board: GoalBoardController) -> None:
    goal_id = backing.add_goal("Read", "old", 10, GoalType.MONTHLY)
    board.load()
    goal = board.find_goal(goal_id)
    assert goal is not None

    board.open_edit(goal)
    form = board.edit_dialog.form
    assert board.edit_dialog.is_open
    assert form == EditGoalForm(id=goal_id, title="Read", description="old", target_value=10)

    assert board.submit_edit(EditGoalForm(id=goal_id, title="Read more", description="", target_value=12))

    assert board.edit_dialog.is_open is False
    assert board.goals == _fresh(backing)
    assert board.goals[0].description is None


def test_edit_failure_keeps_dialog_open(
    backing: KeyValueGoalStore, flaky: FlakyStore, board: GoalBoardController
) -> None:
    goal_id = backing.add_goal("Read", None, 10, GoalType.DAILY)
    board.load()
    board.open_edit(board.goals[0])
    flaky.failing.add("update_goal")

    assert board.submit_edit(EditGoalForm(id=goal_id, title="New", description="", target_value=3)) is False

    assert board.error == UPDATE_FAILED_MESSAGE
    assert board.edit_dialog.is_open is True
    assert board.goals[0].title == "Read"


def test_edit_with_zero_target_is_rejected_locally(
    backing: KeyValueGoalStore, flaky: FlakyStore, board: GoalBoardController
) -> None:
    goal_id = backing.add_goal("Read", None, 10, GoalType.DAILY)
    board.load()

    assert board.submit_edit(EditGoalForm(id=goal_id, title="Read", description="", target_value=0)) is False

    assert "update_goal" not in flaky.calls
    assert board.error is not None


def test_delete_flow_removes_goal(backing: KeyValueGoalStore, board: GoalBoardController) -> None:
    keep = backing.add_goal("Keep", None, 1, GoalType.DAILY)
    drop = backing.add_goal("Drop", None, 1, GoalType.DAILY)
    board.load()

    board.request_delete(drop)
    assert board.delete_dialog.is_open
    assert board.delete_dialog.goal_title == "Drop"

    assert board.confirm_delete() is True

    assert [g.id for g in board.goals] == [keep]
    assert board.goals == _fresh(backing)
    assert board.delete_dialog.is_open is False


def test_confirm_delete_without_selection_fails_fast(flaky: FlakyStore, board: GoalBoardController) -> None:
    board.load()

    assert board.confirm_delete() is False

    assert board.error == NO_GOAL_SELECTED_MESSAGE
    assert "delete_goal" not in flaky.calls


def test_delete_failure_reports_reason(
    backing: KeyValueGoalStore, flaky: FlakyStore, board: GoalBoardController
) -> None:
    goal_id = backing.add_goal("Read", None, 1, GoalType.DAILY)
    board.load()
    board.request_delete(goal_id)
    flaky.failing.add("delete_goal")

    assert board.confirm_delete() is False

    assert board.error == "Failed to delete goal: delete_goal exploded"
    assert len(board.goals) == 1
    assert board.delete_dialog.is_open is True


def test_request_delete_of_unknown_goal_uses_placeholder_title(board: GoalBoardController) -> None:
    board.load()
    board.request_delete(404)

    assert board.delete_dialog.goal_title == "Unknown Goal"

    board.cancel_delete()
    assert board.delete_dialog.is_open is False
    assert board.delete_dialog.goal_id is None


def test_reset_daily_goals_patches_daily_only(
    backing: KeyValueGoalStore, board: GoalBoardController
) -> None:
    daily = backing.add_goal("Daily", None, 10, GoalType.DAILY)
    weekly = backing.add_goal("Weekly", None, 10, GoalType.WEEKLY)
    backing.increment_goal(daily, 4)
    backing.increment_goal(weekly, 4)
    board.load()

    assert board.reset_daily_goals() is True

    assert board.goals == _fresh(backing)


def test_goals_of_type_filters_and_counts(backing: KeyValueGoalStore, board: GoalBoardController) -> None:
    backing.add_goal("D1", None, 1, GoalType.DAILY)
    backing.add_goal("W1", None, 1, GoalType.WEEKLY)
    backing.add_goal("D2", None, 1, GoalType.DAILY)
    board.load()

    assert [g.title for g in board.goals_of_type(GoalType.DAILY)] == ["D2", "D1"]
    assert board.goals_of_type(GoalType.YEARLY) == []
    assert board.active_goal_count == 3


def test_read_goal_end_to_end(store: GoalStore, fixed_clock: FixedClock) -> None:
    board = GoalBoardController(store, clock=fixed_clock)
    board.load()

    goal_id = board.submit_add(AddGoalForm(title="Read", target_value=10, goal_type=GoalType.DAILY))
    assert goal_id is not None

    board.increment(goal_id, 3)
    goal = board.find_goal(goal_id)
    assert goal is not None
    assert format_progress(goal) == "3 / 10 (30%)"

    board.increment(goal_id, 8)
    goal = board.find_goal(goal_id)
    assert goal is not None
    assert format_progress(goal) == "11 / 10 (100%)"

    stored = store.get_goal(goal_id)
    assert stored is not None
    assert stored.current_value == 11


def test_retry_after_failed_load_stays_ready(flaky: FlakyStore, fixed_clock: FixedClock) -> None:
    seen: list[ViewPhase] = []

    class _PhaseRecordingStore:
        def get_goals(self) -> Sequence[Goal]:
            seen.append(board.phase)
            return flaky.get_goals()

    board = GoalBoardController(_PhaseRecordingStore(), clock=fixed_clock)  # type: ignore[arg-type]
    flaky.failing.add("get_goals")
    assert board.load() is False

    flaky.failing.clear()
    assert board.load() is True

    assert seen == [ViewPhase.LOADING, ViewPhase.READY]
    assert board.phase is ViewPhase.READY
