from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .model import Employee
from .repository import EmployeeRepository

DEFAULT_ROSTER: tuple[Employee, ...] = (
    Employee("emp1", "Muhammad Bilal", "Development"),
    Employee("emp2", "Saif Akram", "Development"),
    Employee("emp3", "Fizza Rehan", "Development"),
    Employee("emp4", "Ali Hassan", "Development"),
    Employee("emp5", "Muhammad Shoaib", "Development"),
    Employee("emp6", "Muhammad Hamza", "Development"),
    Employee("emp7", "Khubaib Akhter", "Development"),
    Employee("emp8", "Muhammad Usama", "Development"),
    Employee("emp9", "Mohsin Mehfooz", "Development"),
    Employee("emp10", "Taimor Agha", "Development"),
    Employee("emp11", "Ahsan Shahzad", "Development"),
    Employee("emp12", "Muhammad Umer", "Development"),
    Employee("emp13", "Shanzay", "Development"),
    Employee("emp14", "Haroon Humayun", "Development"),
    Employee("emp15", "Muhammad Shabir", "Development"),
    Employee("emp16", "Hashim Ali", "Development"),
    Employee("emp17", "Mutahir", "Development"),
    Employee("emp18", "Umar Humayun", "Development"),
)


class StaticEmployeeRoster(EmployeeRepository):
    """Read-only roster loaded once at startup."""

    def __init__(self, employees: Iterable[Employee] = DEFAULT_ROSTER):
        self._employees = tuple(employees)
        self._by_id = {e.employee_id: e for e in self._employees}

    def list_all(self) -> Sequence[Employee]:
        return self._employees

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)
