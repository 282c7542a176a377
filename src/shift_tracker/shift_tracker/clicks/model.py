from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Click:
    """Domain entity: a timestamped activity event inside one shift. Immutable."""

    click_id: str
    shift_id: str
    employee_id: str
    timestamp: datetime
