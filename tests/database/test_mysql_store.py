from __future__ import annotations

from datetime import datetime

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.shift_tracker.shift_tracker.core.exceptions import NetworkFailureError
from src.shift_tracker.shift_tracker.database.document_store import SERVER_TIMESTAMP, OrderBy, RangeFilter
from src.shift_tracker.shift_tracker.database.mysql_store import MySQLDocumentStore


class FakeDatabase:
    """Connection factory recording every statement; results are scripted."""

    def __init__(self):
        self.executed: list[tuple[str, tuple]] = []
        self.results: list[list[dict]] = []
        self.rowcount = 1
        self.fail_on: tuple[str, Exception] | None = None
        self.commits = 0
        self.rollbacks = 0
        self.connect_error: Exception | None = None

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        return FakeConnection(self)


class FakeConnection:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def cursor(self, dictionary=False):
        return FakeCursor(self._db)

    def commit(self):
        self._db.commits += 1

    def rollback(self):
        self._db.rollbacks += 1

    def close(self):
        pass


class FakeCursor:
    def __init__(self, db: FakeDatabase):
        self._db = db
        self.rowcount = -1

    def execute(self, sql, params=()):
        self._db.executed.append((sql, tuple(params)))
        if self._db.fail_on and sql.startswith(self._db.fail_on[0]):
            raise self._db.fail_on[1]
        self.rowcount = self._db.rowcount

    def _next_rows(self) -> list[dict]:
        return self._db.results.pop(0) if self._db.results else []

    def fetchone(self):
        rows = self._next_rows()
        return rows[0] if rows else None

    def fetchall(self):
        return self._next_rows()

    def close(self):
        pass


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def mysql_store(db) -> MySQLDocumentStore:
    return MySQLDocumentStore(db)


def test_insert_uses_server_time_for_timestamp_sentinel(db, mysql_store):
    record_id = mysql_store.insert("clicks", {"shift_id": "s1", "employee_id": "emp1", "timestamp": SERVER_TIMESTAMP})

    sql, params = db.executed[0]
    assert sql == (
        "INSERT INTO `clicks` (`id`, `shift_id`, `employee_id`, `timestamp`) VALUES (%s, %s, %s, NOW(6))"
    )
    assert params == (record_id, "s1", "emp1")
    assert len(record_id) == 32
    assert db.commits == 1


def test_insert_if_absent_refuses_when_a_row_matches(db, mysql_store):
    db.results = [[{"id": "existing"}]]

    assert mysql_store.insert_if_absent(
        "shifts", {"employee_id": "emp1", "is_active": True}, equals={"employee_id": "emp1", "is_active": True}
    ) is None

    sql, params = db.executed[0]
    assert sql == "SELECT `id` FROM `shifts` WHERE `employee_id`=%s AND `is_active`=%s LIMIT 1"
    assert "FOR UPDATE" not in sql
    assert params == ("emp1", True)
    assert len(db.executed) == 1


def test_insert_if_absent_reports_unique_key_conflict_as_refused(db, mysql_store):
    db.fail_on = ("INSERT", mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY))

    result = mysql_store.insert_if_absent(
        "shifts",
        {"employee_id": "emp1", "check_in": SERVER_TIMESTAMP, "is_active": True},
        equals={"employee_id": "emp1", "is_active": True},
    )

    assert result is None
    assert db.rollbacks == 1


def test_insert_if_absent_inserts_when_nothing_matches(db, mysql_store):
    snapshots = []
    mysql_store.subscribe("shifts", snapshots.append)
    db.results = [[], [{"id": "x", "employee_id": "emp1"}]]

    record_id = mysql_store.insert_if_absent(
        "shifts", {"employee_id": "emp1", "is_active": True}, equals={"employee_id": "emp1", "is_active": True}
    )

    assert record_id is not None
    assert db.executed[-2][0].startswith("INSERT INTO `shifts`")
    assert snapshots[-1] == [{"id": "x", "employee_id": "emp1"}]


def test_other_driver_errors_become_network_failures(db, mysql_store):
    db.fail_on = ("INSERT", mysql.connector.OperationalError(msg="Lost connection", errno=errorcode.CR_SERVER_LOST))

    with pytest.raises(NetworkFailureError):
        mysql_store.insert_if_absent("shifts", {"employee_id": "emp1"}, equals={"employee_id": "emp1"})

    db.connect_error = mysql.connector.InterfaceError(msg="Can't connect")
    with pytest.raises(NetworkFailureError) as exc:
        mysql_store.get("shifts", "s1")
    assert str(exc.value) == "Could not load the record. Please try again."


def test_update_where_adds_guard_and_server_time(db, mysql_store):
    assert mysql_store.update_where(
        "shifts", "s1", {"check_out": SERVER_TIMESTAMP, "is_active": False}, equals={"is_active": True}
    ) is True

    sql, params = db.executed[0]
    assert sql == "UPDATE `shifts` SET `check_out`=NOW(6), `is_active`=%s WHERE `is_active`=%s AND `id`=%s"
    assert params == (False, True, "s1")


def test_update_where_reports_no_matching_row(db, mysql_store):
    snapshots = []
    mysql_store.subscribe("shifts", snapshots.append)
    db.rowcount = 0

    assert mysql_store.update_where("shifts", "s1", {"is_active": False}, equals={"is_active": True}) is False
    assert len(snapshots) == 1


def test_update_confirms_existence_when_nothing_changed(db, mysql_store):
    db.rowcount = 0
    db.results = [[{"id": "s1", "employee_id": "emp1"}]]
    assert mysql_store.update("shifts", "s1", {"employee_id": "emp1"}) is True
    assert db.executed[0][0] == "UPDATE `shifts` SET `employee_id`=%s WHERE `id`=%s"
    assert db.executed[1][0].startswith("SELECT `id`, `employee_id`")

    assert mysql_store.update("shifts", "missing", {"employee_id": "emp1"}) is False


def test_query_builds_ranges_and_ordering(db, mysql_store):
    start, end = datetime(2026, 2, 1), datetime(2026, 2, 1, 23, 59, 59)
    db.results = [[{"id": "s1"}]]

    rows = mysql_store.query(
        "shifts",
        equals={"employee_id": "emp1"},
        ranges=(RangeFilter("check_in", ">=", start), RangeFilter("check_in", "<=", end)),
        order_by=OrderBy("check_in", descending=True),
    )

    sql, params = db.executed[0]
    assert sql == (
        "SELECT `id`, `employee_id`, `check_in`, `check_out`, `is_active`, `started_at` FROM `shifts`"
        " WHERE `employee_id`=%s AND `check_in` >= %s AND `check_in` <= %s AND `check_in` IS NOT NULL"
        " ORDER BY `check_in` DESC, `seq` ASC"
    )
    assert params == ("emp1", start, end)
    assert rows == [{"id": "s1"}]


def test_unknown_collection_or_field_is_rejected(mysql_store):
    with pytest.raises(ValueError):
        mysql_store.insert("payroll", {"amount": 1})
    with pytest.raises(ValueError):
        mysql_store.query("clicks", equals={"note": "x"})
