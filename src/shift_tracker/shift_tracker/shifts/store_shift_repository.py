from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import day_bounds
from ..core.constants import SHIFTS_COLLECTION
from ..core.exceptions import MalformedRecordError
from ..database.document_store import SERVER_TIMESTAMP, DocumentStore, OrderBy, RangeFilter, Unsubscribe
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


def shift_from_record(record: Mapping[str, Any]) -> Shift:
    """Validate a raw store record and coerce it into a Shift."""
    try:
        shift_id = str(record["id"])
        employee_id = str(record["employee_id"])
        check_in = record["check_in"]
        is_active = bool(record.get("is_active", False))
    except KeyError as exc:
        raise MalformedRecordError(f"Shift record is missing {exc.args[0]!r}") from exc

    check_out = record.get("check_out")
    if not isinstance(check_in, datetime):
        raise MalformedRecordError(f"Shift {shift_id} has no check-in time")
    if check_out is not None and not isinstance(check_out, datetime):
        raise MalformedRecordError(f"Shift {shift_id} has an invalid check-out time")
    if is_active == (check_out is not None):
        raise MalformedRecordError(f"Shift {shift_id} has inconsistent check-out/is_active")

    return Shift(
        shift_id=shift_id,
        employee_id=employee_id,
        check_in=check_in,
        check_out=check_out,
        is_active=is_active,
        started_at=record.get("started_at"),
    )


def shifts_from_snapshot(records: Sequence[Mapping[str, Any]]) -> list[Shift]:
    shifts: list[Shift] = []
    for r in records:
        try:
            shifts.append(shift_from_record(r))
        except MalformedRecordError as exc:
            logger.warning("Skipping shift record %s: %s", r.get("id"), exc)
    return shifts


class StoreShiftRepository(ShiftRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        record = self._store.get(SHIFTS_COLLECTION, shift_id)
        if not record:
            return None
        return shift_from_record(record)

    def find_active_for_employee(self, employee_id: str) -> Optional[Shift]:
        records = self._store.query(
            SHIFTS_COLLECTION,
            equals={"employee_id": employee_id, "is_active": True},
        )
        shifts = shifts_from_snapshot(records)
        if len(shifts) > 1:
            logger.warning("Employee %s has %d active shifts", employee_id, len(shifts))
        return shifts[0] if shifts else None

    def create_active(self, *, employee_id: str, started_at: Optional[str] = None) -> Optional[str]:
        return self._store.insert_if_absent(
            SHIFTS_COLLECTION,
            {
                "employee_id": employee_id,
                "check_in": SERVER_TIMESTAMP,
                "is_active": True,
                "started_at": started_at,
            },
            equals={"employee_id": employee_id, "is_active": True},
        )

    def close(self, shift_id: str) -> bool:
        return self._store.update_where(
            SHIFTS_COLLECTION,
            shift_id,
            {"check_out": SERVER_TIMESTAMP, "is_active": False},
            equals={"is_active": True},
        )

    def list_for_day(self, day: date) -> Sequence[Shift]:
        return shifts_from_snapshot(self._store.query(SHIFTS_COLLECTION, **self._day_query(day)))

    def subscribe_day(self, day: date, on_shifts: Callable[[list[Shift]], None]) -> Unsubscribe:
        return self._store.subscribe(
            SHIFTS_COLLECTION,
            lambda records: on_shifts(shifts_from_snapshot(records)),
            **self._day_query(day),
        )

    @staticmethod
    def _day_query(day: date) -> dict:
        start, end = day_bounds(day)
        return {
            "ranges": (RangeFilter("check_in", ">=", start), RangeFilter("check_in", "<=", end)),
            "order_by": OrderBy("check_in", descending=True),
        }
