from __future__ import annotations

from enum import Enum


class PrincipalKind(str, Enum):
    """Loại chủ thể đã xác thực."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class EmploymentStatus(str, Enum):
    WORKING = "working"
    RESIGNED = "resigned"


class AttendanceStatus(str, Enum):
    """Trạng thái chấm công lưu trong mảng attendance."""

    PRESENT = "present"
    LATE = "late"
    HALF_DAY = "half-day"
    ABSENT = "absent"


class LeaveStatus(str, Enum):
    """Luồng duyệt đơn nghỉ phép. PENDING là trạng thái duy nhất chưa kết thúc."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveType(str, Enum):
    CASUAL = "casual"
    SICK = "sick"
    ANNUAL = "annual"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    PATERNITY = "paternity"


class EducationType(str, Enum):
    TWELFTH = "12th"
    DIPLOMA = "diploma"
