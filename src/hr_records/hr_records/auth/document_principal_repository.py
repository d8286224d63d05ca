from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.constants import ADMINS, EMPLOYEES
from ..core.enums import AccountStatus, EmploymentStatus, PrincipalKind
from ..database.document_store import DocumentStore
from .model import Principal
from .repository import PrincipalRepository


def _admin_from_doc(doc: Dict[str, Any]) -> Principal:
    return Principal(
        principal_id=doc["id"],
        kind=PrincipalKind.ADMIN,
        name=doc.get("name") or "",
        phone=doc.get("mobile") or "",
        active=bool(doc.get("active", False)),
        is_admin=True,
        password_hash=doc.get("passwordHash"),
        legacy_password=doc.get("password"),
    )


def _employee_from_doc(doc: Dict[str, Any]) -> Principal:
    employment_status = doc.get("employmentStatus")
    return Principal(
        principal_id=doc["id"],
        kind=PrincipalKind.EMPLOYEE,
        name=doc.get("name") or "",
        phone=doc.get("phone") or "",
        active=doc.get("status", AccountStatus.ACTIVE.value) == AccountStatus.ACTIVE.value,
        employment_status=EmploymentStatus(employment_status) if employment_status else None,
        resigned=bool(doc.get("resigned", False)),
        password_hash=doc.get("passwordHash"),
        legacy_password=doc.get("password"),
    )


class DocumentPrincipalRepository(PrincipalRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_admin_by_phone(self, phone: str) -> Optional[Principal]:
        docs = self._store.find(ADMINS, "mobile", phone)
        if not docs:
            return None
        active = [d for d in docs if d.get("active")]
        return _admin_from_doc((active or docs)[0])

    def get_employee_by_phone(self, phone: str) -> Optional[Principal]:
        docs = self._store.find(EMPLOYEES, "phone", phone)
        if not docs:
            return None
        active = [d for d in docs if d.get("status", AccountStatus.ACTIVE.value) == AccountStatus.ACTIVE.value]
        return _employee_from_doc((active or docs)[0])

    def get_by_id(self, kind: PrincipalKind, principal_id: str) -> Optional[Principal]:
        if kind == PrincipalKind.ADMIN:
            doc = self._store.get(ADMINS, principal_id)
            return _admin_from_doc(doc) if doc else None
        doc = self._store.get(EMPLOYEES, principal_id)
        return _employee_from_doc(doc) if doc else None

    def store_password_hash(self, kind: PrincipalKind, principal_id: str, password_hash: str) -> None:
        collection = ADMINS if kind == PrincipalKind.ADMIN else EMPLOYEES
        doc = self._store.get(collection, principal_id)
        if not doc:
            return
        doc.pop("password", None)
        doc["passwordHash"] = password_hash
        self._store.set(collection, principal_id, doc)
