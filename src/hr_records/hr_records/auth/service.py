from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from ..common.datetime_utils import now_local
from ..common.validators import normalize_phone
from ..core.constants import CREDENTIAL_FIELDS, DEFAULT_ADMIN_SESSION_TTL_HOURS, EMPLOYEES
from ..core.enums import PrincipalKind
from ..core.exceptions import AuthenticationError, ValidationError
from ..database.document_store import DocumentStore
from ..employees.migration import migrate
from .credentials import hash_password, needs_rehash, verify_password
from .model import AdminLogin, AdminSession, AuthContext, EmployeeLogin, Principal
from .repository import AdminSessionRepository, PrincipalRepository

logger = logging.getLogger(__name__)

# One message for every credential failure: never reveal whether phone or password was wrong.
INVALID_CREDENTIALS = "Invalid phone number or password"


class SessionManager:
    """Two independent session lifecycles.

    * Administrator: durable ``admin_sessions`` record with a fixed TTL.
    * Employee: no server-side session; the client holds the employee record and every
      call is checked against the employee id it presents.
    """

    def __init__(
        self,
        principals: PrincipalRepository,
        sessions: AdminSessionRepository,
        store: DocumentStore,
        *,
        ttl_hours: int = DEFAULT_ADMIN_SESSION_TTL_HOURS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._principals = principals
        self._sessions = sessions
        self._store = store
        self._ttl = timedelta(hours=int(ttl_hours))
        self._clock = clock

    # -------- shared --------
    def resolve_principal_by_phone(self, phone: str) -> Optional[Principal]:
        """Administrator first, then Employee; only active accounts match."""
        try:
            phone = normalize_phone(phone)
        except ValidationError:
            return None

        admin = self._principals.get_admin_by_phone(phone)
        if admin and admin.active:
            return admin

        employee = self._principals.get_employee_by_phone(phone)
        if employee and employee.active:
            return employee
        return None

    def _upgrade_legacy_credential(self, principal: Principal, password: str) -> None:
        if needs_rehash(principal):
            self._principals.store_password_hash(principal.kind, principal.principal_id, hash_password(password))
            logger.info("Upgraded cleartext credential of %s %s", principal.kind.value, principal.principal_id)

    # -------- administrator --------
    def admin_login(self, phone: str, password: str, *, now: Optional[datetime] = None) -> AdminLogin:
        now = now or self._clock()
        try:
            phone = normalize_phone(phone)
        except ValidationError:
            raise AuthenticationError(INVALID_CREDENTIALS)

        admin = self._principals.get_admin_by_phone(phone)
        if not admin or not admin.active or not verify_password(admin, password):
            logger.warning("Administrator login rejected")
            raise AuthenticationError(INVALID_CREDENTIALS)

        self._upgrade_legacy_credential(admin, password)

        expires_at = now + self._ttl
        session_id = self._sessions.create(admin=admin, created_at=now, expires_at=expires_at)
        logger.info("Administrator session %s opened for %s", session_id, admin.principal_id)

        context = AuthContext(
            principal_id=admin.principal_id,
            kind=PrincipalKind.ADMIN,
            expires_at=expires_at,
            session_id=session_id,
            display_name=admin.name,
        )
        return AdminLogin(session_id=session_id, admin=admin, context=context)

    def validate_admin_session(self, session_id: str, *, now: Optional[datetime] = None) -> Optional[AdminSession]:
        if not session_id:
            return None
        now = now or self._clock()
        session = self._sessions.get(session_id)
        if session and session.is_valid_at(now):
            return session
        return None

    def admin_context(self, session_id: Optional[str], *, now: Optional[datetime] = None) -> AuthContext:
        session = self.validate_admin_session(session_id or "", now=now)
        if not session:
            raise AuthenticationError("No administrator session found. Please log in as admin first.")

        admin = self._principals.get_by_id(PrincipalKind.ADMIN, session.admin_id)
        if not admin or not admin.active:
            raise AuthenticationError("No administrator session found. Please log in as admin first.")

        return AuthContext(
            principal_id=admin.principal_id,
            kind=PrincipalKind.ADMIN,
            expires_at=session.expires_at,
            session_id=session.session_id,
            display_name=admin.name,
        )

    def admin_logout(self, session_id: Optional[str], *, now: Optional[datetime] = None) -> bool:
        """Deactivate the server-side session. Client-held copies are the caller's to clear."""
        if not session_id:
            return False
        ended = self._sessions.deactivate(session_id, ended_at=now or self._clock())
        if ended:
            logger.info("Administrator session %s closed", session_id)
        return ended

    # -------- employee --------
    def employee_login(self, phone: str, password: str) -> EmployeeLogin:
        try:
            phone = normalize_phone(phone)
        except ValidationError:
            raise AuthenticationError(INVALID_CREDENTIALS)

        employee = self._principals.get_employee_by_phone(phone)
        if not employee or not employee.active or not verify_password(employee, password):
            logger.warning("Employee login rejected")
            raise AuthenticationError(INVALID_CREDENTIALS)

        self._upgrade_legacy_credential(employee, password)

        doc = self._store.get(EMPLOYEES, employee.principal_id) or {}
        record = public_employee_record(migrate(doc))
        context = AuthContext(
            principal_id=employee.principal_id,
            kind=PrincipalKind.EMPLOYEE,
            display_name=employee.name,
        )
        return EmployeeLogin(record=record, context=context)

    def employee_context(self, employee_id: Optional[str]) -> AuthContext:
        if not employee_id:
            raise AuthenticationError("No employee session found. Please log in first.")

        employee = self._principals.get_by_id(PrincipalKind.EMPLOYEE, employee_id)
        if not employee or not employee.active:
            raise AuthenticationError("No employee session found. Please log in first.")

        return AuthContext(
            principal_id=employee.principal_id,
            kind=PrincipalKind.EMPLOYEE,
            display_name=employee.name,
        )


def public_employee_record(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in doc.items() if k not in CREDENTIAL_FIELDS}
