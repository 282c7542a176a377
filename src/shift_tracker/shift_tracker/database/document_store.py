"""Document store boundary.

Shift and click records live in an external document store that offers
point-in-time queries plus realtime subscriptions pushing the full matching
set on every change. Services depend on the ``DocumentStore`` protocol, not
on a concrete backend.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence

Record = dict[str, Any]
Snapshot = list[Record]
SnapshotCallback = Callable[[Snapshot], None]
Unsubscribe = Callable[[], None]


class _ServerTimestamp:
    """Sentinel replaced by the store with its own clock on write."""

    _instance: Optional["_ServerTimestamp"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()

RANGE_OPERATORS: Mapping[str, Callable[[Any, Any], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
}


@dataclass(frozen=True)
class RangeFilter:
    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in RANGE_OPERATORS:
            raise ValueError(f"Unsupported range operator: {self.op!r}")


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class QuerySpec:
    """A collection query: equality filters, range filters and ordering."""

    collection: str
    equals: tuple[tuple[str, Any], ...] = ()
    ranges: tuple[RangeFilter, ...] = ()
    order_by: Optional[OrderBy] = None

    @classmethod
    def build(
        cls,
        collection: str,
        *,
        equals: Optional[Mapping[str, Any]] = None,
        ranges: Sequence[RangeFilter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> "QuerySpec":
        return cls(
            collection=collection,
            equals=tuple(sorted((equals or {}).items())),
            ranges=tuple(ranges),
            order_by=order_by,
        )

    def matches(self, record: Mapping[str, Any]) -> bool:
        for name, expected in self.equals:
            if record.get(name) != expected:
                return False
        for rf in self.ranges:
            value = record.get(rf.field)
            if value is None or not RANGE_OPERATORS[rf.op](value, rf.value):
                return False
        if self.order_by and record.get(self.order_by.field) is None:
            return False
        return True

    def apply(self, records: Sequence[Mapping[str, Any]]) -> Snapshot:
        """Filter and order records; ties keep their input order."""
        out = [dict(r) for r in records if self.matches(r)]
        if self.order_by:
            out.sort(key=lambda r: r[self.order_by.field], reverse=self.order_by.descending)
        return out


class DocumentStore(Protocol):
    def insert(self, collection: str, record: Mapping[str, Any]) -> str:
        raise NotImplementedError

    def insert_if_absent(
        self,
        collection: str,
        record: Mapping[str, Any],
        *,
        equals: Mapping[str, Any],
    ) -> Optional[str]:
        """Insert atomically unless a record matching ``equals`` exists.

        Returns the new id, or None when a matching record already exists.
        """

        raise NotImplementedError

    def update(self, collection: str, record_id: str, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def update_where(
        self,
        collection: str,
        record_id: str,
        changes: Mapping[str, Any],
        *,
        equals: Mapping[str, Any],
    ) -> bool:
        """Apply ``changes`` only if the record still matches ``equals``."""

        raise NotImplementedError

    def get(self, collection: str, record_id: str) -> Optional[Record]:
        raise NotImplementedError

    def query(
        self,
        collection: str,
        *,
        equals: Optional[Mapping[str, Any]] = None,
        ranges: Sequence[RangeFilter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> Snapshot:
        raise NotImplementedError

    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        *,
        equals: Optional[Mapping[str, Any]] = None,
        ranges: Sequence[RangeFilter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> Unsubscribe:
        raise NotImplementedError
