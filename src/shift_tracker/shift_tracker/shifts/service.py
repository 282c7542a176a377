from __future__ import annotations

import logging
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.exceptions import AlreadyClosedError, DuplicateActiveShiftError, ShiftNotFoundError
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


class ShiftRegistry:
    """Use case: open and close shifts, at most one open shift per employee.

    Uniqueness is enforced by a single atomic conditional insert in the
    store, never by a separate read followed by a write: two concurrent
    ``start_shift`` calls for the same employee cannot both succeed. A store
    without an atomic ``insert_if_absent`` would reopen that race.
    """

    def __init__(self, shifts: ShiftRepository, *, clock: Callable = now_local):
        self._shifts = shifts
        self._clock = clock

    def start_shift(self, employee_id: str) -> str:
        employee_id = require_non_empty(employee_id, "Employee")
        shift_id = self._shifts.create_active(
            employee_id=employee_id,
            started_at=self._clock().isoformat(),
        )
        if shift_id is None:
            logger.warning("Refused second active shift for %s", employee_id)
            raise DuplicateActiveShiftError()
        logger.info("Shift %s started for %s", shift_id, employee_id)
        return shift_id

    def end_shift(self, shift_id: str) -> None:
        shift = self.get_shift(shift_id)
        if not shift.is_active:
            raise AlreadyClosedError()
        if not self._shifts.close(shift.shift_id):
            # Closed by someone else between the read and the write.
            raise AlreadyClosedError()
        logger.info("Shift %s ended for %s", shift.shift_id, shift.employee_id)

    def get_shift(self, shift_id: str) -> Shift:
        shift_id = require_non_empty(shift_id, "Shift")
        shift = self._shifts.get_by_id(shift_id)
        if not shift:
            raise ShiftNotFoundError()
        return shift

    def get_active_shift(self, employee_id: str) -> Optional[Shift]:
        employee_id = require_non_empty(employee_id, "Employee")
        return self._shifts.find_active_for_employee(employee_id)
