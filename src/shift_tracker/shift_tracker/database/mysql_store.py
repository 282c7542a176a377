from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Optional, Sequence

import mysql.connector

from ..core.constants import CLICKS_COLLECTION, SHIFTS_COLLECTION
from ..core.exceptions import NetworkFailureError
from .connection import DatabaseConnection
from .document_store import (
    SERVER_TIMESTAMP,
    DocumentStore,
    OrderBy,
    QuerySpec,
    RangeFilter,
    Record,
    Snapshot,
    SnapshotCallback,
    Unsubscribe,
)
from .mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, store_errors
from .subscriptions import SubscriptionHub

logger = logging.getLogger(__name__)

# Collection -> writable columns. Collections map 1:1 to tables.
COLLECTION_COLUMNS: dict[str, tuple[str, ...]] = {
    SHIFTS_COLLECTION: ("employee_id", "check_in", "check_out", "is_active", "started_at"),
    CLICKS_COLLECTION: ("shift_id", "employee_id", "timestamp"),
}


class MySQLDocumentStore(DocumentStore):
    """Document store on top of the ``shifts`` / ``clicks`` MySQL tables.

    Server timestamps come from ``NOW(6)`` on the database server. One active
    shift per employee is backed by the ``uq_shifts_active_employee`` unique
    key (see database/schema.sql), so ``insert_if_absent`` stays atomic even
    across processes.

    Realtime listeners are refreshed after every write made through this
    instance; call ``refresh()`` to pick up writes made by other processes.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._hub = SubscriptionHub(self._run_query)

    def insert(self, collection: str, record: Mapping[str, Any]) -> str:
        record_id = uuid.uuid4().hex
        with store_errors("save the record"):
            with db_cursor(self._conn_factory) as (_, cur):
                self._execute_insert(cur, collection, record_id, record)
        self._hub.publish(collection)
        return record_id

    def insert_if_absent(
        self,
        collection: str,
        record: Mapping[str, Any],
        *,
        equals: Mapping[str, Any],
    ) -> Optional[str]:
        """Insert unless a row matching ``equals`` exists.

        The plain SELECT only refuses early. Atomicity comes from a unique key
        covering ``equals`` (``uq_shifts_active_employee`` for active shifts):
        a concurrent insert that loses fails with ER_DUP_ENTRY and is reported
        as refused.
        """
        table = self._table(collection)
        where_sql, params = self._where(QuerySpec.build(collection, equals=equals))
        record_id = uuid.uuid4().hex
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT `id` FROM `{table}`{where_sql} LIMIT 1", params)
                if fetchone(cur):
                    return None
                self._execute_insert(cur, collection, record_id, record)
        except mysql.connector.Error as exc:
            if is_duplicate_key(exc):
                logger.info("Conditional insert into %s refused by unique key", table)
                return None
            raise NetworkFailureError("Could not save the record. Please try again.") from exc
        self._hub.publish(collection)
        return record_id

    def update(self, collection: str, record_id: str, changes: Mapping[str, Any]) -> bool:
        if self.update_where(collection, record_id, changes, equals={}):
            return True
        # rowcount is 0 when the values were already in place.
        return self.get(collection, record_id) is not None

    def update_where(
        self,
        collection: str,
        record_id: str,
        changes: Mapping[str, Any],
        *,
        equals: Mapping[str, Any],
    ) -> bool:
        table = self._table(collection)
        set_sql, set_params = self._assignments(collection, changes)
        where_sql, where_params = self._where(QuerySpec.build(collection, equals=equals))
        where_sql = f"{where_sql} AND `id`=%s" if where_sql else " WHERE `id`=%s"
        with store_errors("update the record"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE `{table}` SET {set_sql}{where_sql}",
                    (*set_params, *where_params, record_id),
                )
                updated = cur.rowcount > 0
        if updated:
            self._hub.publish(collection)
        return updated

    def get(self, collection: str, record_id: str) -> Optional[Record]:
        table = self._table(collection)
        columns = self._select_list(collection)
        with store_errors("load the record"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT {columns} FROM `{table}` WHERE `id`=%s", (record_id,))
                return fetchone(cur)

    def query(
        self,
        collection: str,
        *,
        equals: Optional[Mapping[str, Any]] = None,
        ranges: Sequence[RangeFilter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> Snapshot:
        return self._run_query(QuerySpec.build(collection, equals=equals, ranges=ranges, order_by=order_by))

    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        *,
        equals: Optional[Mapping[str, Any]] = None,
        ranges: Sequence[RangeFilter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> Unsubscribe:
        spec = QuerySpec.build(collection, equals=equals, ranges=ranges, order_by=order_by)
        return self._hub.subscribe(spec, on_snapshot)

    def refresh(self) -> None:
        """Re-push every open subscription from the current table contents."""
        self._hub.publish_all()

    def _run_query(self, spec: QuerySpec) -> Snapshot:
        table = self._table(spec.collection)
        columns = self._select_list(spec.collection)
        where_sql, params = self._where(spec)
        if spec.order_by:
            direction = "DESC" if spec.order_by.descending else "ASC"
            order_sql = f" ORDER BY `{spec.order_by.field}` {direction}, `seq` ASC"
        else:
            order_sql = " ORDER BY `seq` ASC"
        with store_errors("load records"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT {columns} FROM `{table}`{where_sql}{order_sql}", params)
                return fetchall(cur)

    def _execute_insert(self, cur, collection: str, record_id: str, record: Mapping[str, Any]) -> None:
        table = self._table(collection)
        self._check_fields(collection, record.keys())
        names = ["`id`"]
        placeholders = ["%s"]
        params: list[Any] = [record_id]
        for name, value in record.items():
            names.append(f"`{name}`")
            if value is SERVER_TIMESTAMP:
                placeholders.append("NOW(6)")
            else:
                placeholders.append("%s")
                params.append(value)
        cur.execute(
            f"INSERT INTO `{table}` ({', '.join(names)}) VALUES ({', '.join(placeholders)})",
            tuple(params),
        )

    def _assignments(self, collection: str, changes: Mapping[str, Any]) -> tuple[str, list[Any]]:
        self._check_fields(collection, changes.keys())
        parts: list[str] = []
        params: list[Any] = []
        for name, value in changes.items():
            if value is SERVER_TIMESTAMP:
                parts.append(f"`{name}`=NOW(6)")
            else:
                parts.append(f"`{name}`=%s")
                params.append(value)
        return ", ".join(parts), params

    def _where(self, spec: QuerySpec) -> tuple[str, list[Any]]:
        fields = [name for name, _ in spec.equals] + [rf.field for rf in spec.ranges]
        if spec.order_by:
            fields.append(spec.order_by.field)
        self._check_fields(spec.collection, fields)

        clauses: list[str] = []
        params: list[Any] = []
        for name, value in spec.equals:
            clauses.append(f"`{name}`=%s")
            params.append(value)
        for rf in spec.ranges:
            clauses.append(f"`{rf.field}` {rf.op} %s")
            params.append(rf.value)
        if spec.order_by:
            clauses.append(f"`{spec.order_by.field}` IS NOT NULL")
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    def _select_list(self, collection: str) -> str:
        return ", ".join(f"`{c}`" for c in ("id", *COLLECTION_COLUMNS[collection]))

    @staticmethod
    def _table(collection: str) -> str:
        if collection not in COLLECTION_COLUMNS:
            raise ValueError(f"Unknown collection: {collection!r}")
        return collection

    def _check_fields(self, collection: str, names) -> None:
        allowed = COLLECTION_COLUMNS[self._table(collection)]
        unknown = [n for n in names if n not in allowed and n != "id"]
        if unknown:
            raise ValueError(f"Unknown fields for {collection}: {', '.join(unknown)}")
