from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Collection, Optional, Sequence

from .model import AttendanceRecord
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, AttendanceRecord] = {}
        self._by_day: dict[tuple[int, date], int] = {}
        self._next_id = 1

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            attendance_id = self._by_day.get((int(employee_id), work_date))
            return self._rows.get(attendance_id) if attendance_id is not None else None

    def open_session(self, *, employee_id: int, work_date: date, login_time: datetime) -> AttendanceRecord:
        key = (int(employee_id), work_date)
        with self._lock:
            existing = self._by_day.get(key)
            if existing is not None:
                return self._rows[existing]

            record = AttendanceRecord(
                attendance_id=self._next_id,
                employee_id=key[0],
                work_date=work_date,
                login_time=login_time,
            )
            self._next_id += 1
            self._rows[record.attendance_id] = record
            self._by_day[key] = record.attendance_id
            return record

    def close_session(self, attendance_id: int, *, logout_time: datetime) -> bool:
        with self._lock:
            record = self._rows.get(int(attendance_id))
            if record is None or not record.is_open:
                return False
            self._rows[record.attendance_id] = replace(record, logout_time=logout_time)
            return True

    def list_records(
        self,
        *,
        employee_ids: Optional[Collection[int]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        with self._lock:
            rows = list(self._rows.values())
        rows = [
            r
            for r in rows
            if (employee_ids is None or r.employee_id in employee_ids)
            and (start is None or r.work_date >= start)
            and (end is None or r.work_date <= end)
        ]
        rows.sort(key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        return rows
