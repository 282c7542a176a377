from __future__ import annotations

from datetime import date
from typing import Callable

from ..clicks.repository import ClickRepository
from ..employees.repository import EmployeeRepository
from ..realtime.aggregator import AggregateView, RealtimeAggregator
from ..shifts.repository import ShiftRepository
from .view import AdminQueryView, ExpansionState


class AdminDashboard:
    """One viewer's dashboard: live aggregator, selected day and expanded row.

    The selected day and expansion are owned here and passed down; nothing
    is kept in module-level state. ``close()`` unsubscribes both streams.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        clicks: ClickRepository,
        employees: EmployeeRepository,
        *,
        day: date,
        expansion: ExpansionState = ExpansionState(),
    ):
        self._employees = employees
        self._expansion = expansion
        self._aggregator = RealtimeAggregator(shifts, clicks, day=day)

    def __enter__(self) -> "AdminDashboard":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def day(self) -> date:
        return self._aggregator.day

    @property
    def expansion(self) -> ExpansionState:
        return self._expansion

    def open(self) -> None:
        self._aggregator.start()

    def close(self) -> None:
        self._aggregator.stop()

    def on_change(self, listener: Callable[[AggregateView], None]) -> Callable[[], None]:
        return self._aggregator.add_listener(listener)

    def select_day(self, day: date) -> None:
        self._aggregator.select_day(day)

    def toggle(self, shift_id: str) -> ExpansionState:
        self._expansion = self._expansion.select(shift_id)
        return self._expansion

    def set_expansion(self, expansion: ExpansionState) -> None:
        self._expansion = expansion

    def query_view(self) -> AdminQueryView:
        return AdminQueryView(self._aggregator.view, self._employees, self._expansion)

    def snapshot(self) -> dict:
        return self.query_view().as_dict()
