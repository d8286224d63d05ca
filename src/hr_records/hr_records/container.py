from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping, Optional, Tuple

from .auth.document_principal_repository import DocumentPrincipalRepository
from .auth.document_session_repository import DocumentAdminSessionRepository
from .auth.service import SessionManager
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_ADMIN_SESSION_TTL_HOURS
from .core.exceptions import ConfigurationError
from .counters.service import SequentialIdGenerator
from .database.connection import DBConfig, DatabaseConnection
from .database.document_store import DocumentStore
from .database.memory_document_store import InMemoryDocumentStore
from .database.mysql_document_store import MySQLDocumentStore
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .employments.attendance_rules import AttendanceRules
from .employments.attendance_service import AttendanceService
from .employments.leave_service import LeaveService
from .employments.mutator import EmbeddedCollectionMutator
from .employments.repository import EmploymentRepository
from .employments.service import EmploymentService
from .salaries.repository import SalaryRepository
from .salaries.service import SalaryService
from .uniqueness.service import UniquenessValidator


@dataclass(frozen=True)
class Container:
    store: DocumentStore

    principals_repo: DocumentPrincipalRepository
    sessions_repo: DocumentAdminSessionRepository
    employees_repo: EmployeeRepository
    employments_repo: EmploymentRepository
    salaries_repo: SalaryRepository

    ids: SequentialIdGenerator
    session_manager: SessionManager
    uniqueness: UniquenessValidator
    employee_service: EmployeeService
    employment_service: EmploymentService
    attendance_service: AttendanceService
    leave_service: LeaveService
    salary_service: SalaryService


def build_store(*, backend: str, db_config: Optional[dict] = None) -> DocumentStore:
    if backend == "memory":
        return InMemoryDocumentStore()
    if backend != "mysql":
        raise ConfigurationError(f"Unknown store backend: {backend!r}")
    if not db_config:
        raise ConfigurationError("DB_CONFIG is required for the mysql store backend")

    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    return MySQLDocumentStore(DatabaseConnection.get_instance(config))


def build_container(
    *,
    db_config: Optional[dict] = None,
    store_backend: str = "mysql",
    store: Optional[DocumentStore] = None,
    ttl_hours: int = DEFAULT_ADMIN_SESSION_TTL_HOURS,
    rules: Optional[AttendanceRules] = None,
    id_formats: Optional[Mapping[str, Tuple[str, int]]] = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    store = store or build_store(backend=store_backend, db_config=db_config)

    principals_repo = DocumentPrincipalRepository(store)
    sessions_repo = DocumentAdminSessionRepository(store)
    employees_repo = EmployeeRepository(store, clock=clock)
    employments_repo = EmploymentRepository(store, clock=clock)
    salaries_repo = SalaryRepository(store, clock=clock)

    ids = SequentialIdGenerator(store, id_formats)
    session_manager = SessionManager(principals_repo, sessions_repo, store, ttl_hours=ttl_hours, clock=clock)
    uniqueness = UniquenessValidator(store, session_manager)
    mutator = EmbeddedCollectionMutator(store, clock=clock)

    employee_service = EmployeeService(employees_repo, uniqueness, ids)
    employment_service = EmploymentService(employments_repo, employees_repo, ids)
    attendance_service = AttendanceService(employments_repo, mutator, rules=rules, clock=clock)
    leave_service = LeaveService(employments_repo, principals_repo, mutator, clock=clock)
    salary_service = SalaryService(salaries_repo, employees_repo, ids)

    return Container(
        store=store,
        principals_repo=principals_repo,
        sessions_repo=sessions_repo,
        employees_repo=employees_repo,
        employments_repo=employments_repo,
        salaries_repo=salaries_repo,
        ids=ids,
        session_manager=session_manager,
        uniqueness=uniqueness,
        employee_service=employee_service,
        employment_service=employment_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        salary_service=salary_service,
    )
