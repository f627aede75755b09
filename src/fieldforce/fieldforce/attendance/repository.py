from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def open_session(self, *, employee_id: int, work_date: date, login_time: datetime) -> AttendanceRecord:
        """Return the record for (employee, day), creating it if there is none.

        An existing record is returned unchanged, whether open or closed.
        """

        raise NotImplementedError

    def close_session(self, attendance_id: int, *, logout_time: datetime) -> bool:
        """Set ``logout_time`` only if the record is still open."""

        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_ids: Optional[Collection[int]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records with ``start <= work_date <= end``, newest day first."""

        raise NotImplementedError
