from __future__ import annotations

from datetime import datetime
from typing import Optional

import mysql.connector

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import BankDetails
from .repository import BankDetailsRepository

_COLUMNS = "bank_details_id, employee_id, bank_name, ifsc_code, account_number, created_at, updated_at"


def _to_details(r: dict) -> BankDetails:
    return BankDetails(
        bank_details_id=int(r["bank_details_id"]),
        employee_id=int(r["employee_id"]),
        bank_name=r["bank_name"],
        ifsc_code=r["ifsc_code"],
        account_number=r["account_number"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLBankDetailsRepository(BankDetailsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee(self, employee_id: int) -> Optional[BankDetails]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM bank_details WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_details(row) if row else None

    def save(
        self,
        *,
        employee_id: int,
        bank_name: str,
        ifsc_code: str,
        account_number: str,
        now: datetime,
    ) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO bank_details(employee_id, bank_name, ifsc_code, account_number, created_at, updated_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), bank_name, ifsc_code, account_number, now, now),
                )
                return True
        except mysql.connector.IntegrityError:
            # uq_bank_details_employee: the employee already has a row.
            pass

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE bank_details
                SET bank_name=%s, ifsc_code=%s, account_number=%s, updated_at=%s
                WHERE employee_id=%s
                """,
                (bank_name, ifsc_code, account_number, now, int(employee_id)),
            )
            return False

    def delete_for_employee(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM bank_details WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0
