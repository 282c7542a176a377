from __future__ import annotations

from enum import Enum


class ShiftState(str, Enum):
    """Shift status as displayed on the admin dashboard."""

    ACTIVE = "Active"
    CLOSED = "Closed"


class StoreBackend(str, Enum):
    """Which document store implementation the container wires up."""

    MYSQL = "mysql"
    MEMORY = "memory"
