from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from ..auth.credentials import hash_password
from ..auth.guard import require_admin, require_self, require_self_or_admin
from ..auth.model import AuthContext
from ..auth.service import public_employee_record
from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty
from ..core.constants import ADMIN_ONLY_EMPLOYEE_FIELDS, CURRENT_EMPLOYEE_SCHEMA_VERSION, EMPLOYEES
from ..core.enums import AccountStatus, EmploymentStatus
from ..core.exceptions import ConflictError
from ..counters.service import SequentialIdGenerator
from ..records.model import AUDIT_FIELDS, Record, strip_absent
from ..uniqueness.service import UniquenessValidator
from .education import validate_secondary_education, with_entry_ids
from .migration import is_current, migrate, migrate_for_storage
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

# Never accepted from callers; credentials only change through "password".
_PROTECTED_KEYS = ("id", "passwordHash") + AUDIT_FIELDS


def default_password(phone: str) -> str:
    return f"{phone[-5:]}@#$$"


class EmployeeService:
    """Use case: manage employee records (admin) and the employee's own profile."""

    def __init__(self, employees: EmployeeRepository, uniqueness: UniquenessValidator, ids: SequentialIdGenerator):
        self._employees = employees
        self._uniqueness = uniqueness
        self._ids = ids

    def _ensure_employee_code_free(self, code: str, *, exclude_id: Optional[str] = None) -> str:
        code = require_non_empty(code, "Employee ID")
        if self._uniqueness.is_value_used("employeeId", code, (EMPLOYEES,), exclude_id=exclude_id):
            raise ConflictError(f"Employee ID {code} is already in use")
        return code

    def _normalize_education(self, doc: Record) -> Record:
        doc = migrate_for_storage(doc)
        if isinstance(doc.get("secondaryEducation"), list):
            doc["secondaryEducation"] = with_entry_ids(doc["secondaryEducation"])
        validate_secondary_education(doc)
        return doc

    def create_employee(self, ctx: AuthContext, data: Dict[str, Any], *, assign_employee_id: bool = False) -> Record:
        require_admin(ctx)

        payload = strip_absent({k: v for k, v in data.items() if k not in _PROTECTED_KEYS})
        require_non_empty(payload.get("name", ""), "Name")
        payload["phone"] = self._uniqueness.ensure_phone_available(payload.get("phone", ""))

        pan = str(payload.pop("panCard", "") or "").strip()
        if pan:
            payload["panCard"] = self._uniqueness.ensure_tax_id_available(pan)

        if payload.get("employeeId"):
            payload["employeeId"] = self._ensure_employee_code_free(payload["employeeId"])

        password = payload.pop("password", None) or default_password(payload["phone"])
        payload["passwordHash"] = hash_password(password)

        payload = self._normalize_education(payload)
        payload.update(
            status=AccountStatus.ACTIVE.value,
            employmentStatus=EmploymentStatus.WORKING.value,
            resigned=False,
        )

        # Reserve last so a rejected payload does not burn a sequence number.
        if assign_employee_id and not payload.get("employeeId"):
            payload["employeeId"] = self._ids.reserve_unused_id(
                "employee",
                lambda code: self._uniqueness.is_value_used("employeeId", code, (EMPLOYEES,)),
            )

        created = self._employees.create(ctx, payload)
        return public_employee_record(created)

    def get_employee(self, ctx: AuthContext, employee_id: str) -> Record:
        require_self_or_admin(ctx, employee_id)
        return public_employee_record(migrate(self._employees.require(employee_id)))

    def list_employees(self, ctx: AuthContext) -> List[Record]:
        require_admin(ctx)
        return [public_employee_record(migrate(d)) for d in self._employees.list()]

    def _apply_update(self, ctx: AuthContext, existing: Record, data: Dict[str, Any]) -> Record:
        employee_id = existing["id"]
        payload = strip_absent({k: v for k, v in data.items() if k not in _PROTECTED_KEYS})

        if "phone" in payload:
            payload["phone"] = self._uniqueness.ensure_phone_available(payload["phone"], exclude_id=employee_id)

        if "panCard" in payload:
            pan = str(payload.pop("panCard") or "").strip()
            if pan:
                payload["panCard"] = self._uniqueness.ensure_tax_id_available(pan, exclude_employee_id=employee_id)

        if payload.get("employeeId") and payload["employeeId"] != existing.get("employeeId"):
            payload["employeeId"] = self._ensure_employee_code_free(payload["employeeId"], exclude_id=employee_id)

        # No password supplied: the stored credential stays as it is.
        password = payload.pop("password", None)
        merged = {**existing, **payload}
        if password:
            merged.pop("password", None)
            merged["passwordHash"] = hash_password(password)

        merged = self._normalize_education(merged)
        updated = self._employees.replace(ctx, employee_id, merged)
        return public_employee_record(updated)

    def update_employee(self, ctx: AuthContext, employee_id: str, data: Dict[str, Any]) -> Record:
        require_admin(ctx)
        existing = self._employees.require(employee_id)
        return self._apply_update(ctx, existing, data)

    def update_own_profile(self, ctx: AuthContext, employee_id: str, data: Dict[str, Any]) -> Record:
        """Self-service update; status, resignation and id fields are admin-only."""
        require_self(ctx, employee_id)
        existing = self._employees.require(employee_id)
        allowed = {k: v for k, v in data.items() if k not in ADMIN_ONLY_EMPLOYEE_FIELDS}
        dropped = sorted(set(data) & ADMIN_ONLY_EMPLOYEE_FIELDS)
        if dropped:
            logger.info("Self-service update of %s ignored admin-only fields %s", employee_id, dropped)
        return self._apply_update(ctx, existing, allowed)

    def set_employee_status(self, ctx: AuthContext, employee_id: str, *, active: bool) -> Record:
        require_admin(ctx)
        self._employees.require(employee_id)
        status = AccountStatus.ACTIVE if active else AccountStatus.INACTIVE
        return public_employee_record(self._employees.update(ctx, employee_id, {"status": status.value}))

    def resign_employee(
        self,
        ctx: AuthContext,
        employee_id: str,
        *,
        resignation_date: date,
        last_working_date: Optional[date] = None,
    ) -> Record:
        require_admin(ctx)
        self._employees.require(employee_id)
        resignation_date = parse_iso_date(resignation_date)
        last_working_date = parse_iso_date(last_working_date) if last_working_date else None
        updated = self._employees.update(
            ctx,
            employee_id,
            {
                "employmentStatus": EmploymentStatus.RESIGNED.value,
                "resigned": True,
                "resignationDate": resignation_date.isoformat(),
                "lastWorkingDate": last_working_date.isoformat() if last_working_date else None,
            },
        )
        return public_employee_record(updated)

    def delete_employee(self, ctx: AuthContext, employee_id: str) -> None:
        require_admin(ctx)
        self._employees.require(employee_id)
        self._employees.delete(employee_id)

    def migrate_all(self, ctx: AuthContext) -> int:
        """One-shot storage migration of every employee still on the legacy shape."""
        require_admin(ctx)
        migrated = 0
        for doc in self._employees.list():
            if is_current(doc):
                continue
            self._employees.replace(ctx, doc["id"], self._normalize_education(doc))
            migrated += 1
        logger.info("Employee schema migration to v%s: %s record(s) rewritten", CURRENT_EMPLOYEE_SCHEMA_VERSION, migrated)
        return migrated
