from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .admin.dashboard import AdminDashboard
from .admin.view import ExpansionState
from .auth.service import AuthService
from .clicks.service import ClickLog
from .clicks.store_click_repository import StoreClickRepository
from .core.enums import StoreBackend
from .database.connection import DBConfig, DatabaseConnection
from .database.document_store import DocumentStore
from .database.memory_store import InMemoryDocumentStore
from .database.mysql_store import MySQLDocumentStore
from .employees.roster import StaticEmployeeRoster
from .shifts.actions import ShiftActions
from .shifts.service import ShiftRegistry
from .shifts.status import ShiftStatusPanel
from .shifts.store_shift_repository import StoreShiftRepository


@dataclass(frozen=True)
class Container:
    store: DocumentStore

    employees: StaticEmployeeRoster
    shifts_repo: StoreShiftRepository
    clicks_repo: StoreClickRepository

    shift_registry: ShiftRegistry
    click_log: ClickLog
    status_panel: ShiftStatusPanel
    shift_actions: ShiftActions
    auth_service: AuthService

    def new_dashboard(self, *, day: date, expansion: ExpansionState = ExpansionState()) -> AdminDashboard:
        return AdminDashboard(self.shifts_repo, self.clicks_repo, self.employees, day=day, expansion=expansion)


def build_store(*, backend: str, db_config: Optional[dict] = None) -> DocumentStore:
    if StoreBackend(backend) is StoreBackend.MEMORY:
        return InMemoryDocumentStore()
    if not db_config:
        raise ValueError("DB_CONFIG is required for the mysql store backend")
    return MySQLDocumentStore(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))


def build_container(
    *,
    admin_username: str,
    admin_password_hash: str,
    backend: str = StoreBackend.MYSQL.value,
    db_config: Optional[dict] = None,
    store: Optional[DocumentStore] = None,
) -> Container:
    store = store or build_store(backend=backend, db_config=db_config)

    employees = StaticEmployeeRoster()
    shifts_repo = StoreShiftRepository(store)
    clicks_repo = StoreClickRepository(store)

    shift_registry = ShiftRegistry(shifts_repo)
    click_log = ClickLog(clicks_repo, shift_registry)
    status_panel = ShiftStatusPanel(shift_registry, click_log, employees)
    shift_actions = ShiftActions(shift_registry, click_log, employees)
    auth_service = AuthService(username=admin_username, password_hash=admin_password_hash)

    return Container(
        store=store,
        employees=employees,
        shifts_repo=shifts_repo,
        clicks_repo=clicks_repo,
        shift_registry=shift_registry,
        click_log=click_log,
        status_panel=status_panel,
        shift_actions=shift_actions,
        auth_service=auth_service,
    )
