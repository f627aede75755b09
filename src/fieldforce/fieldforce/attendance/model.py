from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's working session for one day."""

    attendance_id: int
    employee_id: int
    work_date: date
    login_time: datetime
    logout_time: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.logout_time is None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "employee_id": self.employee_id,
            "work_date": self.work_date.isoformat(),
            "login_time": self.login_time.isoformat(),
            "logout_time": self.logout_time.isoformat() if self.logout_time else None,
        }
