from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from ..common.datetime_utils import format_display, to_seconds
from ..core.enums import ShiftState
from ..durations.calculator import gap_sequence
from ..employees.repository import EmployeeRepository
from ..realtime.aggregator import AggregateView


@dataclass(frozen=True)
class ExpansionState:
    """Which shift row is expanded; at most one at a time.

    collapsed --select(id)--> expanded(id) --select(id)--> collapsed;
    select(other) while expanded goes straight to expanded(other).
    """

    expanded_id: Optional[str] = None

    @property
    def is_collapsed(self) -> bool:
        return self.expanded_id is None

    def select(self, shift_id: str) -> "ExpansionState":
        if self.expanded_id == shift_id:
            return ExpansionState()
        return ExpansionState(expanded_id=shift_id)


@dataclass(frozen=True)
class ShiftRow:
    shift_id: str
    employee_id: str
    employee_name: str
    check_in: str
    check_out: str
    status: str
    click_count: int
    expanded: bool


@dataclass(frozen=True)
class ClickDetailRow:
    click_id: str
    clicked_at: str
    since_previous: str


class AdminQueryView:
    """Read-only admin table built from the aggregator's latest view."""

    def __init__(
        self,
        view: AggregateView,
        employees: EmployeeRepository,
        expansion: ExpansionState = ExpansionState(),
    ):
        self._view = view
        self._employees = employees
        self._expansion = expansion

    @property
    def expansion(self) -> ExpansionState:
        return self._expansion

    def select(self, shift_id: str) -> ExpansionState:
        self._expansion = self._expansion.select(shift_id)
        return self._expansion

    def rows(self) -> list[ShiftRow]:
        rows = []
        for shift in self._view.shifts:
            employee = self._employees.get_by_id(shift.employee_id)
            rows.append(
                ShiftRow(
                    shift_id=shift.shift_id,
                    employee_id=shift.employee_id,
                    employee_name=employee.name if employee else shift.employee_id,
                    check_in=format_display(shift.check_in),
                    check_out=format_display(shift.check_out),
                    status=(ShiftState.ACTIVE if shift.is_active else ShiftState.CLOSED).value,
                    click_count=self._view.click_count(shift.shift_id),
                    expanded=shift.shift_id == self._expansion.expanded_id,
                )
            )
        return rows

    def details(self) -> list[ClickDetailRow]:
        """Click rows of the expanded shift; empty when collapsed."""
        if self._expansion.is_collapsed:
            return []
        clicks = self._view.clicks_for(self._expansion.expanded_id)
        gaps = gap_sequence(to_seconds(c.timestamp) for c in clicks)
        return [
            ClickDetailRow(click_id=c.click_id, clicked_at=format_display(c.timestamp), since_previous=gap)
            for c, gap in zip(clicks, gaps)
        ]

    def as_dict(self) -> dict:
        return {
            "date": self._view.day.isoformat(),
            "loading": self._view.loading,
            "expanded_shift_id": self._expansion.expanded_id,
            "shifts": [asdict(r) for r in self.rows()],
            "details": [asdict(d) for d in self.details()],
        }
