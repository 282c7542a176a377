from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from ..clicks.service import ClickLog
from ..core.exceptions import ActionInProgressError, DomainError, NetworkFailureError, ValidationError
from ..employees.repository import EmployeeRepository
from .service import ShiftRegistry

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Action completed successfully!"


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    message: str
    code: Optional[str] = None
    shift_id: Optional[str] = None

    def as_dict(self) -> dict:
        out = {"success": self.ok, "message": self.message}
        if self.code:
            out["code"] = self.code
        if self.shift_id:
            out["shift_id"] = self.shift_id
        return out


class ShiftActions:
    """Action boundary for start shift / add click / end shift.

    Domain errors never escape: each one becomes a failed ActionResult with a
    short message. The busy flag for an employee is set before the store call
    and cleared on every exit path; a second action for the same employee
    while one is in flight is rejected instead of queued.
    """

    def __init__(self, registry: ShiftRegistry, click_log: ClickLog, employees: EmployeeRepository):
        self._registry = registry
        self._click_log = click_log
        self._employees = employees
        self._busy: set[str] = set()
        self._busy_lock = threading.Lock()

    def is_busy(self, key: str) -> bool:
        with self._busy_lock:
            return key in self._busy

    def start_shift(self, employee_id: str) -> ActionResult:
        def action() -> ActionResult:
            self._require_employee(employee_id)
            shift_id = self._registry.start_shift(employee_id)
            return ActionResult(ok=True, message=SUCCESS_MESSAGE, shift_id=shift_id)

        return self._run(employee_id, "start shift", action)

    def add_click(self, employee_id: str) -> ActionResult:
        def action() -> ActionResult:
            self._require_employee(employee_id)
            self._click_log.record_click(employee_id)
            return ActionResult(ok=True, message=SUCCESS_MESSAGE)

        return self._run(employee_id, "add click", action)

    def end_shift(self, shift_id: str) -> ActionResult:
        def action() -> ActionResult:
            self._registry.end_shift(shift_id)
            return ActionResult(ok=True, message=SUCCESS_MESSAGE, shift_id=shift_id)

        return self._run(f"shift:{shift_id}", "end shift", action)

    def _require_employee(self, employee_id: str) -> None:
        if not employee_id or self._employees.get_by_id(employee_id) is None:
            raise ValidationError("Please select an employee")

    def _run(self, key: str, label: str, action: Callable[[], ActionResult]) -> ActionResult:
        try:
            with self._busy_for(key):
                return action()
        except NetworkFailureError as e:
            logger.warning("%s failed for %s: %s", label, key, e)
            return ActionResult(ok=False, message=f"Failed to {label}. Please try again.", code=e.code)
        except DomainError as e:
            logger.warning("%s rejected for %s: %s", label, key, e)
            return ActionResult(ok=False, message=str(e), code=e.code)

    @contextmanager
    def _busy_for(self, key: str) -> Iterator[None]:
        with self._busy_lock:
            if key in self._busy:
                raise ActionInProgressError()
            self._busy.add(key)
        try:
            yield
        finally:
            with self._busy_lock:
                self._busy.discard(key)
