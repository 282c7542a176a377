from __future__ import annotations

import pytest

from src.shift_tracker.shift_tracker.core.exceptions import NoActiveShiftError


def test_click_requires_active_shift(click_log, store):
    with pytest.raises(NoActiveShiftError):
        click_log.record_click("emp1")

    assert store.query("clicks") == []


def test_clicks_bind_to_the_open_shift(click_log, registry, clock):
    shift_id = registry.start_shift("emp1")
    for _ in range(3):
        clock.advance(10)
        click_log.record_click("emp1")

    clicks = click_log.list_for_shift(shift_id)
    assert click_log.count_for_shift(shift_id) == 3
    assert {c.shift_id for c in clicks} == {shift_id}
    assert {c.employee_id for c in clicks} == {"emp1"}
    assert [c.timestamp for c in clicks] == sorted(c.timestamp for c in clicks)


def test_clicks_after_restart_go_to_the_new_shift(click_log, registry):
    first = registry.start_shift("emp1")
    click_log.record_click("emp1")
    registry.end_shift(first)

    with pytest.raises(NoActiveShiftError):
        click_log.record_click("emp1")

    second = registry.start_shift("emp1")
    click_log.record_click("emp1")
    click_log.record_click("emp1")

    assert click_log.count_for_shift(first) == 1
    assert click_log.count_for_shift(second) == 2


def test_clicks_of_other_employees_are_not_counted(click_log, registry):
    mine = registry.start_shift("emp1")
    registry.start_shift("emp2")
    click_log.record_click("emp2")

    assert click_log.count_for_shift(mine) == 0
