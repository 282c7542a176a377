from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..clicks.service import ClickLog
from ..common.datetime_utils import format_display, to_seconds
from ..core.exceptions import ValidationError
from ..durations.calculator import since_now
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import Shift
from .service import ShiftRegistry


@dataclass(frozen=True)
class ShiftStatus:
    """What the shift panel shows for an employee with an open shift."""

    employee: Employee
    shift: Shift
    duration: str
    click_count: int

    def as_dict(self) -> dict:
        return {
            "active": True,
            "shift_id": self.shift.shift_id,
            "employee_id": self.employee.employee_id,
            "employee_name": self.employee.name,
            "department": self.employee.department,
            "check_in": format_display(self.shift.check_in),
            "duration": self.duration,
            "click_count": self.click_count,
        }


class ShiftStatusPanel:
    def __init__(self, registry: ShiftRegistry, click_log: ClickLog, employees: EmployeeRepository):
        self._registry = registry
        self._click_log = click_log
        self._employees = employees

    def get_status(self, employee_id: str, *, now_seconds: Optional[float] = None) -> Optional[ShiftStatus]:
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            raise ValidationError("Please select an employee")

        shift = self._registry.get_active_shift(employee_id)
        if shift is None:
            return None

        return ShiftStatus(
            employee=employee,
            shift=shift,
            duration=since_now(to_seconds(shift.check_in), now_seconds=now_seconds).format(),
            click_count=self._click_log.count_for_shift(shift.shift_id),
        )
