from __future__ import annotations

from datetime import datetime

import pytest

from src.shift_tracker.shift_tracker.database.document_store import SERVER_TIMESTAMP, OrderBy, RangeFilter


def test_insert_and_get_returns_copy(store):
    rid = store.insert("shifts", {"employee_id": "emp1", "is_active": True})

    record = store.get("shifts", rid)
    assert record == {"id": rid, "employee_id": "emp1", "is_active": True}

    record["employee_id"] = "mutated"
    assert store.get("shifts", rid)["employee_id"] == "emp1"
    assert store.get("shifts", "missing") is None


def test_server_timestamp_uses_clock_and_never_goes_backwards(store, clock, fixed_now):
    first = store.insert("clicks", {"shift_id": "s1", "timestamp": SERVER_TIMESTAMP})
    clock.advance(-30)
    second = store.insert("clicks", {"shift_id": "s1", "timestamp": SERVER_TIMESTAMP})

    assert store.get("clicks", first)["timestamp"] == fixed_now
    assert store.get("clicks", second)["timestamp"] == fixed_now


def test_query_filters_and_orders(store, clock):
    for employee_id in ("emp1", "emp2", "emp1"):
        store.insert("shifts", {"employee_id": employee_id, "check_in": SERVER_TIMESTAMP})
        clock.advance(60)

    rows = store.query("shifts", equals={"employee_id": "emp1"}, order_by=OrderBy("check_in", descending=True))

    assert [r["employee_id"] for r in rows] == ["emp1", "emp1"]
    assert rows[0]["check_in"] > rows[1]["check_in"]


def test_range_filters_are_inclusive_when_asked(store, clock):
    clock.set(datetime(2026, 2, 1, 8, 0))
    store.insert("shifts", {"check_in": SERVER_TIMESTAMP})
    clock.set(datetime(2026, 2, 1, 12, 0))
    store.insert("shifts", {"check_in": SERVER_TIMESTAMP})

    rows = store.query(
        "shifts",
        ranges=[RangeFilter("check_in", ">=", datetime(2026, 2, 1, 8, 0)), RangeFilter("check_in", "<", datetime(2026, 2, 1, 12, 0))],
    )
    assert [r["check_in"].hour for r in rows] == [8]


def test_descending_order_keeps_insertion_order_for_ties(store):
    a = store.insert("clicks", {"timestamp": SERVER_TIMESTAMP})
    b = store.insert("clicks", {"timestamp": SERVER_TIMESTAMP})

    rows = store.query("clicks", order_by=OrderBy("timestamp", descending=True))
    assert [r["id"] for r in rows] == [a, b]


def test_order_by_excludes_records_without_the_field(store):
    store.insert("clicks", {"shift_id": "s1"})
    store.insert("clicks", {"shift_id": "s1", "timestamp": SERVER_TIMESTAMP})

    assert len(store.query("clicks")) == 2
    assert len(store.query("clicks", order_by=OrderBy("timestamp"))) == 1


def test_unknown_range_operator_rejected():
    with pytest.raises(ValueError):
        RangeFilter("check_in", "!=", 1)


def test_insert_if_absent(store):
    guard = {"employee_id": "emp1", "is_active": True}
    first = store.insert_if_absent("shifts", {"employee_id": "emp1", "is_active": True}, equals=guard)
    second = store.insert_if_absent("shifts", {"employee_id": "emp1", "is_active": True}, equals=guard)

    assert first is not None
    assert second is None
    assert len(store.query("shifts")) == 1


def test_update_where_checks_condition(store):
    rid = store.insert("shifts", {"is_active": True})

    assert store.update_where("shifts", rid, {"is_active": False}, equals={"is_active": True}) is True
    assert store.update_where("shifts", rid, {"is_active": False}, equals={"is_active": True}) is False
    assert store.update("shifts", "missing", {"is_active": False}) is False
    assert store.get("shifts", rid)["is_active"] is False


def test_subscribe_pushes_initial_and_every_change(store):
    snapshots = []
    unsubscribe = store.subscribe("clicks", snapshots.append, equals={"shift_id": "s1"})

    store.insert("clicks", {"shift_id": "s1"})
    store.insert("clicks", {"shift_id": "s2"})

    assert [len(s) for s in snapshots] == [0, 1, 1]

    unsubscribe()
    store.insert("clicks", {"shift_id": "s1"})
    assert len(snapshots) == 3
    assert store.subscriptions.active_count() == 0


def test_subscriptions_only_hear_their_collection(store):
    snapshots = []
    store.subscribe("shifts", snapshots.append)

    store.insert("clicks", {"shift_id": "s1"})

    assert snapshots == [[]]


def test_failing_listener_does_not_break_writes(store):
    def broken(_snapshot):
        raise RuntimeError("boom")

    good = []
    store.subscribe("clicks", broken)
    store.subscribe("clicks", good.append)

    rid = store.insert("clicks", {"shift_id": "s1"})

    assert store.get("clicks", rid) is not None
    assert len(good) == 2
