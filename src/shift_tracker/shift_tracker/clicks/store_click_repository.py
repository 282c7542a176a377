from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Sequence

from ..core.constants import CLICKS_COLLECTION
from ..core.exceptions import MalformedRecordError
from ..database.document_store import SERVER_TIMESTAMP, DocumentStore, OrderBy, Unsubscribe
from .model import Click
from .repository import ClickRepository

logger = logging.getLogger(__name__)

_BY_TIMESTAMP = OrderBy("timestamp")


def click_from_record(record: Mapping[str, Any]) -> Click:
    try:
        click = Click(
            click_id=str(record["id"]),
            shift_id=str(record["shift_id"]),
            employee_id=str(record["employee_id"]),
            timestamp=record["timestamp"],
        )
    except KeyError as exc:
        raise MalformedRecordError(f"Click record is missing {exc.args[0]!r}") from exc
    if not isinstance(click.timestamp, datetime):
        raise MalformedRecordError(f"Click {click.click_id} has no timestamp")
    return click


def clicks_from_snapshot(records: Sequence[Mapping[str, Any]]) -> list[Click]:
    clicks: list[Click] = []
    for r in records:
        try:
            clicks.append(click_from_record(r))
        except MalformedRecordError as exc:
            logger.warning("Skipping click record %s: %s", r.get("id"), exc)
    return clicks


class StoreClickRepository(ClickRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def append(self, *, shift_id: str, employee_id: str) -> str:
        return self._store.insert(
            CLICKS_COLLECTION,
            {"shift_id": shift_id, "employee_id": employee_id, "timestamp": SERVER_TIMESTAMP},
        )

    def list_for_shift(self, shift_id: str) -> Sequence[Click]:
        records = self._store.query(CLICKS_COLLECTION, equals={"shift_id": shift_id}, order_by=_BY_TIMESTAMP)
        return clicks_from_snapshot(records)

    def subscribe_all(self, on_clicks: Callable[[list[Click]], None]) -> Unsubscribe:
        return self._store.subscribe(
            CLICKS_COLLECTION,
            lambda records: on_clicks(clicks_from_snapshot(records)),
            order_by=_BY_TIMESTAMP,
        )
