from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Protocol, Sequence

from ..database.document_store import Unsubscribe
from .model import Shift


class ShiftRepository(Protocol):
    """Repository interface for Shift.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        raise NotImplementedError

    def find_active_for_employee(self, employee_id: str) -> Optional[Shift]:
        raise NotImplementedError

    def create_active(self, *, employee_id: str, started_at: Optional[str] = None) -> Optional[str]:
        """Open a shift unless the employee already has one; None if refused."""

        raise NotImplementedError

    def close(self, shift_id: str) -> bool:
        """Close an active shift; False if it is missing or already closed."""

        raise NotImplementedError

    def list_for_day(self, day: date) -> Sequence[Shift]:
        raise NotImplementedError

    def subscribe_day(self, day: date, on_shifts: Callable[[list[Shift]], None]) -> Unsubscribe:
        raise NotImplementedError
