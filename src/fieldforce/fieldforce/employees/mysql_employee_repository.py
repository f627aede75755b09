from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_int
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, employee_code, full_name, mobile, job_location, role,
    manager_id, bdm_id, created_at
"""


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        employee_code=row["employee_code"],
        full_name=row["full_name"],
        mobile=row["mobile"],
        job_location=row.get("job_location") or "",
        role=Role(row["role"]),
        manager_id=optional_int(row.get("manager_id")),
        bdm_id=optional_int(row.get("bdm_id")),
        created_at=row.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str = "", params: tuple = ()) -> list[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees {where} ORDER BY employee_id ASC",
                params,
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_code=%s", (employee_code,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        return self._select()

    def list_by_role(self, role: Role) -> Sequence[Employee]:
        return self._select("WHERE role=%s", (role.value,))

    def list_by_manager(self, manager_id: int) -> Sequence[Employee]:
        return self._select("WHERE manager_id=%s", (int(manager_id),))

    def list_by_bdm(self, bdm_id: int) -> Sequence[Employee]:
        return self._select("WHERE bdm_id=%s", (int(bdm_id),))

    def search(self, query: str) -> Sequence[Employee]:
        like = f"%{query.lower()}%"
        return self._select(
            """
            WHERE LOWER(full_name) LIKE %s
               OR LOWER(employee_code) LIKE %s
               OR mobile LIKE %s
               OR LOWER(job_location) LIKE %s
            """,
            (like, like, f"%{query}%", like),
        )

    def create_employee(
        self,
        *,
        employee_code: str,
        full_name: str,
        mobile: str,
        job_location: str,
        role: Role,
        manager_id: Optional[int],
        bdm_id: Optional[int],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(employee_code, full_name, mobile, job_location, role, manager_id, bdm_id, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (employee_code, full_name, mobile, job_location, role.value, manager_id, bdm_id, created_at),
            )
            return int(cur.lastrowid)

    def update_profile(self, employee_id: int, *, full_name: str, mobile: str, job_location: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET full_name=%s, mobile=%s, job_location=%s WHERE employee_id=%s",
                (full_name, mobile, job_location, int(employee_id)),
            )
            return cur.rowcount > 0

    def set_manager(self, employee_id: int, *, manager_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET manager_id=%s, "
                "bdm_id=CASE WHEN employee_id=%s THEN NULL ELSE bdm_id END "
                "WHERE employee_id=%s OR bdm_id=%s",
                (int(manager_id), int(employee_id), int(employee_id), int(employee_id)),
            )
            return cur.rowcount > 0

    def set_bdm(self, employee_id: int, *, bdm_id: int) -> bool:
        # One statement reads the BDM's manager and writes both links.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees e
                JOIN employees b ON b.employee_id=%s
                JOIN employees m ON m.employee_id=b.manager_id
                SET e.manager_id=b.manager_id, e.bdm_id=b.employee_id
                WHERE e.employee_id=%s AND b.role=%s AND m.role=%s
                """,
                (int(bdm_id), int(employee_id), Role.BDM.value, Role.MANAGER.value),
            )
            return cur.rowcount > 0

    def clear_links(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET manager_id=NULL, bdm_id=NULL WHERE employee_id=%s",
                (int(employee_id),),
            )
            return cur.rowcount > 0

    def delete_by_id(self, employee_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError:
            # Report and attendance foreign keys are ON DELETE RESTRICT.
            return False
