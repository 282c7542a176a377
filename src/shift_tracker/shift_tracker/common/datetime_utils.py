from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..core.constants import DISPLAY_DATETIME_FORMAT, EMPTY_MARK, ISO_DATE_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def now_local() -> datetime:
    """Naive local time; the default clock for services and the memory store."""
    return datetime.now()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Inclusive [start, end] of a local calendar day."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def to_seconds(value: datetime) -> float:
    """Epoch seconds of a naive local datetime."""
    return value.timestamp()


def format_display(value: Optional[datetime]) -> str:
    if value is None:
        return EMPTY_MARK
    return value.strftime(DISPLAY_DATETIME_FORMAT)
