from __future__ import annotations

import threading
import uuid
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
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
from .subscriptions import SubscriptionHub


class InMemoryDocumentStore(DocumentStore):
    """Process-local document store with realtime snapshots.

    Used for tests and the ``memory`` backend. Server timestamps never go
    backwards, so records written later always sort after earlier ones.
    """

    def __init__(self, *, clock: Callable[[], datetime] = now_local):
        self._clock = clock
        self._collections: dict[str, dict[str, Record]] = {}
        self._last_ts: Optional[datetime] = None
        self._lock = threading.RLock()
        self._hub = SubscriptionHub(self._run_query)

    def insert(self, collection: str, record: Mapping[str, Any]) -> str:
        with self._lock:
            record_id = self._insert_locked(collection, record)
        self._hub.publish(collection)
        return record_id

    def insert_if_absent(
        self,
        collection: str,
        record: Mapping[str, Any],
        *,
        equals: Mapping[str, Any],
    ) -> Optional[str]:
        spec = QuerySpec.build(collection, equals=equals)
        with self._lock:
            if any(spec.matches(r) for r in self._rows(collection)):
                return None
            record_id = self._insert_locked(collection, record)
        self._hub.publish(collection)
        return record_id

    def update(self, collection: str, record_id: str, changes: Mapping[str, Any]) -> bool:
        return self.update_where(collection, record_id, changes, equals={})

    def update_where(
        self,
        collection: str,
        record_id: str,
        changes: Mapping[str, Any],
        *,
        equals: Mapping[str, Any],
    ) -> bool:
        spec = QuerySpec.build(collection, equals=equals)
        with self._lock:
            current = self._collections.get(collection, {}).get(record_id)
            if current is None or not spec.matches(current):
                return False
            current.update(self._resolve(changes))
            current["id"] = record_id
        self._hub.publish(collection)
        return True

    def get(self, collection: str, record_id: str) -> Optional[Record]:
        with self._lock:
            current = self._collections.get(collection, {}).get(record_id)
            return dict(current) if current is not None else None

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

    @property
    def subscriptions(self) -> SubscriptionHub:
        return self._hub

    def _run_query(self, spec: QuerySpec) -> Snapshot:
        with self._lock:
            return spec.apply(self._rows(spec.collection))

    def _rows(self, collection: str) -> list[Record]:
        return list(self._collections.get(collection, {}).values())

    def _insert_locked(self, collection: str, record: Mapping[str, Any]) -> str:
        record_id = uuid.uuid4().hex
        row = self._resolve(record)
        row["id"] = record_id
        self._collections.setdefault(collection, {})[record_id] = row
        return record_id

    def _resolve(self, values: Mapping[str, Any]) -> Record:
        out = dict(values)
        for key, value in out.items():
            if value is SERVER_TIMESTAMP:
                out[key] = self._server_now()
        return out

    def _server_now(self) -> datetime:
        ts = self._clock()
        if self._last_ts is not None and ts < self._last_ts:
            ts = self._last_ts
        self._last_ts = ts
        return ts
