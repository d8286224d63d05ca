from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.hr_records.hr_records.auth.model import AuthContext
from src.hr_records.hr_records.container import build_container
from src.hr_records.hr_records.core.enums import PrincipalKind
from src.hr_records.hr_records.database.bootstrap import ensure_admin
from src.hr_records.hr_records.database.memory_document_store import InMemoryDocumentStore

ADMIN_PHONE = "9000000001"
ADMIN_PASSWORD = "admin-pass"


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 15, 9, 30, 0))


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def container(store, clock):
    return build_container(store=store, clock=clock)


@pytest.fixture
def admin_id(store):
    return ensure_admin(store, name="Head Office", mobile=ADMIN_PHONE, password=ADMIN_PASSWORD)


@pytest.fixture
def admin_ctx(admin_id):
    return AuthContext(principal_id=admin_id, kind=PrincipalKind.ADMIN, display_name="Head Office")


@pytest.fixture
def make_employee(container, admin_ctx):
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        data = {"name": f"Employee {counter['n']}", "phone": f"98765{counter['n']:05d}"}
        data.update(fields)
        return container.employee_service.create_employee(admin_ctx, data)

    return _make


@pytest.fixture
def ctx_for():
    def _ctx(employee: dict) -> AuthContext:
        return AuthContext(principal_id=employee["id"], kind=PrincipalKind.EMPLOYEE, display_name=employee["name"])

    return _ctx
