from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Shift:
    """Domain entity: a bounded work interval for one employee.

    ``check_out`` is set exactly when ``is_active`` is False.
    """

    shift_id: str
    employee_id: str
    check_in: datetime
    check_out: Optional[datetime]
    is_active: bool
    started_at: Optional[str] = None

    def duration_seconds(self) -> Optional[int]:
        if self.check_out is None:
            return None
        return int((self.check_out - self.check_in).total_seconds())
