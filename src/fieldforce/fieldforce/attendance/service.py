from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Actor
from ..employees.repository import EmployeeRepository
from ..hierarchy.visibility import VisibilityResolver
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: daily login/logout sessions.

    At most one record exists per employee and day. A second login on the
    same day returns the first record untouched, even after logout.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        visibility: VisibilityResolver,
    ):
        self._attendance = attendance
        self._employees = employees
        self._visibility = visibility

    def record_login(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        if self._employees.get_by_id(int(employee_id)) is None:
            raise NotFoundError("Employee not found")

        record = self._attendance.open_session(employee_id=int(employee_id), work_date=now.date(), login_time=now)
        logger.info("Employee %s login recorded (session %s since %s)", employee_id, record.attendance_id, record.login_time.isoformat())
        return record

    def record_logout(self, employee_id: int, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        """Close today's open session; ``None`` when there is no active session."""
        now = now or now_local()
        record = self._attendance.get_for_employee_and_date(int(employee_id), now.date())
        if record is None or not record.is_open:
            return None
        if not self._attendance.close_session(record.attendance_id, logout_time=now):
            return None

        logger.info("Employee %s logged out at %s", employee_id, now.isoformat())
        return self._attendance.get_for_employee_and_date(int(employee_id), now.date())

    @staticmethod
    def status_of(record: Optional[AttendanceRecord]) -> AttendanceStatus:
        if record is None:
            return AttendanceStatus.ABSENT
        if record.is_open:
            return AttendanceStatus.LOGGED_IN
        return AttendanceStatus.PRESENT

    def today_record(self, employee_id: int, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(int(employee_id), (now or now_local()).date())

    def daily_overview(self, actor: Actor, work_date: Optional[date] = None) -> list[dict]:
        """One row per visible employee with that day's record and status."""
        work_date = work_date or now_local().date()
        employees = self._visibility.visible_employees(actor)
        records = {
            r.employee_id: r
            for r in self._attendance.list_records(
                employee_ids={e.employee_id for e in employees}, start=work_date, end=work_date
            )
        }

        rows = []
        for employee in employees:
            record = records.get(employee.employee_id)
            status = self.status_of(record)
            rows.append(
                {
                    "employee": employee.to_dict(),
                    "record": record.to_dict() if record else None,
                    "status": status.value,
                    "status_label": status.label,
                }
            )
        return rows

    def history(self, actor: Actor, employee_id: int, *, limit: int = DEFAULT_LIST_LIMIT) -> list[AttendanceRecord]:
        employee = self._visibility.require_visible(actor, employee_id)
        return list(self._attendance.list_records(employee_ids=[employee.employee_id]))[: int(limit)]

    def records_between(self, actor: Actor, start: date, end: date) -> list[AttendanceRecord]:
        if start > end:
            raise ValidationError("Start date must not be after end date")
        ids = None if actor.is_admin else self._visibility.visible_employee_ids(actor)
        return list(self._attendance.list_records(employee_ids=ids, start=start, end=end))
