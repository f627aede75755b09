from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import BankDetails


class BankDetailsRepository(Protocol):
    def get_for_employee(self, employee_id: int) -> Optional[BankDetails]:
        raise NotImplementedError

    def save(
        self,
        *,
        employee_id: int,
        bank_name: str,
        ifsc_code: str,
        account_number: str,
        now: datetime,
    ) -> bool:
        """Insert or overwrite the employee's row; True when a new row was created."""

        raise NotImplementedError

    def delete_for_employee(self, employee_id: int) -> bool:
        raise NotImplementedError
