from __future__ import annotations

from src.shift_tracker.shift_tracker.core.exceptions import NetworkFailureError
from src.shift_tracker.shift_tracker.shifts.actions import SUCCESS_MESSAGE, ShiftActions


class FailingShifts:
    """Shift repository whose every call fails like an unreachable store."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise NetworkFailureError()

        return fail


def test_start_shift_success(actions):
    result = actions.start_shift("emp1")

    assert result.ok is True
    assert result.message == SUCCESS_MESSAGE
    assert result.shift_id
    assert actions.is_busy("emp1") is False


def test_duplicate_start_maps_to_message(actions):
    actions.start_shift("emp1")
    result = actions.start_shift("emp1")

    assert result.ok is False
    assert result.code == "duplicate_active_shift"
    assert result.message == "This employee already has an active shift"
    assert actions.is_busy("emp1") is False


def test_unknown_or_missing_employee(actions):
    for employee_id in ("", "nobody"):
        result = actions.start_shift(employee_id)
        assert result.ok is False
        assert result.message == "Please select an employee"


def test_add_click_without_shift(actions):
    result = actions.add_click("emp1")

    assert result.ok is False
    assert result.code == "no_active_shift"


def test_end_shift_via_actions(actions, registry):
    shift_id = actions.start_shift("emp1").shift_id

    assert actions.end_shift(shift_id).ok is True
    again = actions.end_shift(shift_id)
    assert again.ok is False
    assert again.code == "already_closed"
    missing = actions.end_shift("nope")
    assert missing.code == "shift_not_found"


def test_network_failure_uses_action_message_and_clears_busy(click_log, roster):
    from src.shift_tracker.shift_tracker.shifts.service import ShiftRegistry

    actions = ShiftActions(ShiftRegistry(FailingShifts()), click_log, roster)

    result = actions.start_shift("emp1")

    assert result.ok is False
    assert result.code == "network_failure"
    assert result.message == "Failed to start shift. Please try again."
    assert actions.is_busy("emp1") is False


def test_second_action_while_busy_is_rejected(roster, click_log):
    observed = {}

    class ReentrantRegistry:
        def start_shift(self, employee_id):
            observed["busy"] = actions.is_busy(employee_id)
            observed["nested"] = actions.start_shift(employee_id)
            return "shift-1"

    actions = ShiftActions(ReentrantRegistry(), click_log, roster)

    result = actions.start_shift("emp1")

    assert result.ok is True
    assert observed["busy"] is True
    assert observed["nested"].ok is False
    assert observed["nested"].code == "action_in_progress"
    assert actions.is_busy("emp1") is False


def test_as_dict():
    from src.shift_tracker.shift_tracker.shifts.actions import ActionResult

    assert ActionResult(ok=True, message="ok", shift_id="s1").as_dict() == {
        "success": True,
        "message": "ok",
        "shift_id": "s1",
    }
    assert ActionResult(ok=False, message="no", code="x").as_dict() == {"success": False, "message": "no", "code": "x"}
