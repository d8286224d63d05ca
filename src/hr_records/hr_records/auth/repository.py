from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import PrincipalKind
from .model import AdminSession, Principal


class PrincipalRepository(Protocol):
    """Giao diện tra cứu Administrator / Employee phục vụ đăng nhập.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp kho dữ liệu.
    """

    def get_admin_by_phone(self, phone: str) -> Optional[Principal]:
        raise NotImplementedError

    def get_employee_by_phone(self, phone: str) -> Optional[Principal]:
        raise NotImplementedError

    def get_by_id(self, kind: PrincipalKind, principal_id: str) -> Optional[Principal]:
        raise NotImplementedError

    def store_password_hash(self, kind: PrincipalKind, principal_id: str, password_hash: str) -> None:
        raise NotImplementedError


class AdminSessionRepository(Protocol):
    def create(
        self,
        *,
        admin: Principal,
        created_at: datetime,
        expires_at: datetime,
    ) -> str:
        raise NotImplementedError

    def get(self, session_id: str) -> Optional[AdminSession]:
        raise NotImplementedError

    def deactivate(self, session_id: str, *, ended_at: datetime) -> bool:
        raise NotImplementedError
