from __future__ import annotations

from datetime import date, datetime
from typing import Collection, List, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, employee_id, work_date, login_time, logout_time"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        login_time=r["login_time"],
        logout_time=r.get("logout_time"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def open_session(self, *, employee_id: int, work_date: date, login_time: datetime) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            # uq_attendance_employee_day makes a concurrent second login a no-op.
            cur.execute(
                """
                INSERT IGNORE INTO attendance_records(employee_id, work_date, login_time)
                VALUES(%s,%s,%s)
                """,
                (int(employee_id), work_date, login_time),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            return _to_record(fetchone(cur))

    def close_session(self, attendance_id: int, *, logout_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET logout_time=%s
                WHERE attendance_id=%s AND logout_time IS NULL
                """,
                (logout_time, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        employee_ids: Optional[Collection[int]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses: List[str] = []
        params: List[object] = []
        if employee_ids is not None:
            ids = sorted(int(i) for i in employee_ids)
            if not ids:
                return []
            clauses.append(f"employee_id IN ({', '.join(['%s'] * len(ids))})")
            params.extend(ids)
        if start is not None:
            clauses.append("work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("work_date <= %s")
            params.append(end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records {where} ORDER BY work_date DESC, attendance_id DESC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
