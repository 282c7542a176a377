from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee from the static roster (never persisted)."""

    employee_id: str
    name: str
    department: str
