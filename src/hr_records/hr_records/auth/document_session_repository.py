from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso, parse_iso_datetime
from ..core.constants import ADMIN_SESSIONS
from ..core.exceptions import NotFoundError
from ..database.document_store import DocumentStore
from .model import AdminSession, Principal
from .repository import AdminSessionRepository


class DocumentAdminSessionRepository(AdminSessionRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def create(self, *, admin: Principal, created_at: datetime, expires_at: datetime) -> str:
        return self._store.add(
            ADMIN_SESSIONS,
            {
                "adminId": admin.principal_id,
                "adminName": admin.name,
                "adminMobile": admin.phone,
                "createdAt": iso(created_at),
                "expiresAt": iso(expires_at),
                "isActive": True,
            },
        )

    def get(self, session_id: str) -> Optional[AdminSession]:
        doc = self._store.get(ADMIN_SESSIONS, session_id)
        if not doc:
            return None
        return AdminSession(
            session_id=doc["id"],
            admin_id=doc["adminId"],
            admin_name=doc.get("adminName") or "",
            created_at=parse_iso_datetime(doc["createdAt"]),
            expires_at=parse_iso_datetime(doc["expiresAt"]),
            active=bool(doc.get("isActive", False)),
        )

    def deactivate(self, session_id: str, *, ended_at: datetime) -> bool:
        try:
            self._store.update(ADMIN_SESSIONS, session_id, {"isActive": False, "endedAt": iso(ended_at)})
        except NotFoundError:
            return False
        return True
