from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional

from .model import BankDetails
from .repository import BankDetailsRepository


class InMemoryBankDetailsRepository(BankDetailsRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, BankDetails] = {}
        self._next_id = 1

    def get_for_employee(self, employee_id: int) -> Optional[BankDetails]:
        with self._lock:
            return self._rows.get(int(employee_id))

    def save(
        self,
        *,
        employee_id: int,
        bank_name: str,
        ifsc_code: str,
        account_number: str,
        now: datetime,
    ) -> bool:
        with self._lock:
            current = self._rows.get(int(employee_id))
            if current is not None:
                self._rows[current.employee_id] = replace(
                    current,
                    bank_name=bank_name,
                    ifsc_code=ifsc_code,
                    account_number=account_number,
                    updated_at=now,
                )
                return False

            self._rows[int(employee_id)] = BankDetails(
                bank_details_id=self._next_id,
                employee_id=int(employee_id),
                bank_name=bank_name,
                ifsc_code=ifsc_code,
                account_number=account_number,
                created_at=now,
                updated_at=now,
            )
            self._next_id += 1
            return True

    def delete_for_employee(self, employee_id: int) -> bool:
        with self._lock:
            return self._rows.pop(int(employee_id), None) is not None
