from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable

from .document_store import QuerySpec, Snapshot, SnapshotCallback, Unsubscribe

logger = logging.getLogger(__name__)


@dataclass
class _Subscription:
    sub_id: int
    spec: QuerySpec
    callback: SnapshotCallback
    active: bool = True


class SubscriptionHub:
    """Keeps realtime listeners and pushes full snapshots to them.

    ``run_query`` resolves a QuerySpec against the backing store. Computing
    a snapshot and handing it to its listener happen under one delivery
    lock, so a listener never receives an older snapshot after a newer one.
    The delivery lock is reentrant and separate from the registry lock, so
    listeners may write back into the store or unsubscribe.
    """

    def __init__(self, run_query: Callable[[QuerySpec], Snapshot]):
        self._run_query = run_query
        self._subs: dict[int, _Subscription] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._delivery_lock = threading.RLock()

    def subscribe(self, spec: QuerySpec, callback: SnapshotCallback) -> Unsubscribe:
        sub = _Subscription(sub_id=next(self._ids), spec=spec, callback=callback)
        with self._lock:
            self._subs[sub.sub_id] = sub
        logger.debug("Subscription %s opened on %s", sub.sub_id, spec.collection)

        try:
            self._deliver(sub, initial=True)
        except Exception:
            self._drop(sub)
            raise

        def unsubscribe() -> None:
            self._drop(sub)
            logger.debug("Subscription %s closed", sub.sub_id)

        return unsubscribe

    def publish(self, collection: str) -> None:
        """Push a fresh snapshot to every listener on ``collection``."""
        with self._lock:
            targets = [s for s in self._subs.values() if s.spec.collection == collection]
        for sub in targets:
            self._deliver(sub)

    def publish_all(self) -> None:
        with self._lock:
            targets = list(self._subs.values())
        for sub in targets:
            self._deliver(sub)

    def active_count(self, collection: str | None = None) -> int:
        with self._lock:
            return sum(1 for s in self._subs.values() if collection is None or s.spec.collection == collection)

    def _drop(self, sub: _Subscription) -> None:
        with self._lock:
            sub.active = False
            self._subs.pop(sub.sub_id, None)

    def _deliver(self, sub: _Subscription, *, initial: bool = False) -> None:
        with self._delivery_lock:
            if not sub.active:
                return
            try:
                snapshot = self._run_query(sub.spec)
            except Exception:
                if initial:
                    raise
                logger.exception("Could not refresh subscription %s", sub.sub_id)
                return
            try:
                sub.callback(snapshot)
            except Exception:
                # A broken listener must not fail the write that triggered it.
                logger.exception("Snapshot listener %s failed", sub.sub_id)
