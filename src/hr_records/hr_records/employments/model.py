from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Dict, Optional

from ..common.datetime_utils import parse_iso_date
from ..core.enums import AttendanceStatus, LeaveStatus, LeaveType


@dataclass(frozen=True)
class AttendanceEntry:
    """Một ngày chấm công, lưu trong mảng ``attendance`` của Employment."""

    date: str
    check_in_time: str
    check_in_timestamp: str
    status: AttendanceStatus
    is_late: bool = False
    check_out_time: Optional[str] = None
    check_out_timestamp: Optional[str] = None
    total_hours: Optional[float] = None
    is_early_check_out: bool = False

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_timestamp is not None

    def to_doc(self) -> Dict[str, Any]:
        doc = {
            "date": self.date,
            "checkInTime": self.check_in_time,
            "checkInTimestamp": self.check_in_timestamp,
            "status": self.status.value,
            "isLate": self.is_late,
            "checkOutTime": self.check_out_time,
            "checkOutTimestamp": self.check_out_timestamp,
            "totalHours": self.total_hours,
            "isEarlyCheckOut": self.is_early_check_out,
        }
        return {k: v for k, v in doc.items() if v is not None}

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "AttendanceEntry":
        total = doc.get("totalHours")
        return cls(
            date=doc["date"],
            check_in_time=doc.get("checkInTime") or "",
            check_in_timestamp=doc.get("checkInTimestamp") or "",
            status=AttendanceStatus(doc.get("status", AttendanceStatus.PRESENT.value)),
            is_late=bool(doc.get("isLate", False)),
            check_out_time=doc.get("checkOutTime"),
            check_out_timestamp=doc.get("checkOutTimestamp"),
            total_hours=float(total) if total is not None else None,
            is_early_check_out=bool(doc.get("isEarlyCheckOut", False)),
        )


@dataclass(frozen=True)
class LeaveRecord:
    """Đơn nghỉ phép, lưu trong mảng ``leaves`` của Employment."""

    leave_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    total_days: int
    status: LeaveStatus
    applied_date: str
    approved_by: Optional[str] = None
    approved_at: Optional[str] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[str] = None
    was_edited: bool = False

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING

    def with_changes(self, **changes) -> "LeaveRecord":
        return replace(self, **changes)

    def to_doc(self) -> Dict[str, Any]:
        doc = {
            "id": self.leave_id,
            "type": self.leave_type.value,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "reason": self.reason,
            "totalDays": self.total_days,
            "status": self.status.value,
            "appliedDate": self.applied_date,
            "approvedBy": self.approved_by,
            "approvedAt": self.approved_at,
            "rejectedBy": self.rejected_by,
            "rejectedAt": self.rejected_at,
            "wasEdited": self.was_edited,
        }
        return {k: v for k, v in doc.items() if v is not None}

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "LeaveRecord":
        return cls(
            leave_id=doc["id"],
            leave_type=LeaveType(doc.get("type") or LeaveType.CASUAL.value),
            start_date=parse_iso_date(doc["startDate"]),
            end_date=parse_iso_date(doc["endDate"]),
            reason=doc.get("reason") or "",
            total_days=int(doc.get("totalDays") or 1),
            status=LeaveStatus(doc.get("status") or LeaveStatus.PENDING.value),
            applied_date=doc.get("appliedDate") or "",
            approved_by=doc.get("approvedBy"),
            approved_at=doc.get("approvedAt"),
            rejected_by=doc.get("rejectedBy"),
            rejected_at=doc.get("rejectedAt"),
            was_edited=bool(doc.get("wasEdited", False)),
        )
