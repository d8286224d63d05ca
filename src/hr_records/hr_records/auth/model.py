from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import EmploymentStatus, PrincipalKind


@dataclass(frozen=True)
class Principal:
    """Chủ thể xác thực: Administrator hoặc Employee.

    Credential fields are kept out of repr so they never end up in logs.
    """

    principal_id: str
    kind: PrincipalKind
    name: str
    phone: str
    active: bool
    is_admin: bool = False
    employment_status: Optional[EmploymentStatus] = None
    resigned: bool = False
    password_hash: Optional[str] = field(default=None, repr=False)
    legacy_password: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class AdminSession:
    session_id: str
    admin_id: str
    admin_name: str
    created_at: datetime
    expires_at: datetime
    active: bool

    def is_valid_at(self, now: datetime) -> bool:
        return self.active and now < self.expires_at


@dataclass(frozen=True)
class AuthContext:
    """Who is calling. Resolved once per request and passed into every operation."""

    principal_id: str
    kind: PrincipalKind
    expires_at: Optional[datetime] = None
    session_id: Optional[str] = None
    display_name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.kind == PrincipalKind.ADMIN


@dataclass(frozen=True)
class AdminLogin:
    session_id: str
    admin: Principal
    context: AuthContext


@dataclass(frozen=True)
class EmployeeLogin:
    record: Dict[str, Any]
    context: AuthContext
