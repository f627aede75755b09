from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_min_length, require_non_empty, require_positive_int
from ..core.exceptions import ForbiddenError, NotFoundError, ValidationError
from ..employees.model import Actor
from ..employees.repository import EmployeeRepository
from .model import BankDetails
from .repository import BankDetailsRepository

logger = logging.getLogger(__name__)

MIN_ACCOUNT_NUMBER_LENGTH = 6
IFSC_LENGTH = 11


class BankDetailsService:
    """Use case: read and save an employee's payout account.

    Only the employee themselves or an admin may touch it; the reporting
    hierarchy grants nothing here.
    """

    def __init__(self, bank_details: BankDetailsRepository, employees: EmployeeRepository):
        self._bank_details = bank_details
        self._employees = employees

    @staticmethod
    def _require_self_or_admin(actor: Actor, employee_id: int, action: str) -> None:
        if not actor.is_admin and actor.employee_id != employee_id:
            raise ForbiddenError(f"You can only {action} your own bank details")

    def get(self, actor: Actor, employee_id) -> BankDetails:
        employee_id = require_positive_int(employee_id, "Employee id")
        self._require_self_or_admin(actor, employee_id, "view")
        details = self._bank_details.get_for_employee(employee_id)
        if details is None:
            raise NotFoundError("Bank details not found")
        return details

    def save(
        self,
        actor: Actor,
        employee_id,
        *,
        bank_name: str,
        ifsc_code: str,
        account_number: str,
        now: Optional[datetime] = None,
    ) -> tuple[BankDetails, bool]:
        """Create or overwrite; the flag is True when a new row was created."""
        employee_id = require_positive_int(employee_id, "Employee id")
        self._require_self_or_admin(actor, employee_id, "update")
        if self._employees.get_by_id(employee_id) is None:
            raise NotFoundError("Employee not found")

        ifsc_code = require_non_empty(ifsc_code, "IFSC code").upper()
        if len(ifsc_code) != IFSC_LENGTH:
            raise ValidationError(f"IFSC code must be {IFSC_LENGTH} characters")

        created = self._bank_details.save(
            employee_id=employee_id,
            bank_name=require_non_empty(bank_name, "Bank name"),
            ifsc_code=ifsc_code,
            account_number=require_min_length(account_number, "Account number", MIN_ACCOUNT_NUMBER_LENGTH),
            now=now or now_local(),
        )
        logger.info(
            "Bank details of %s %s by %s", employee_id, "created" if created else "updated", actor.employee_id
        )
        return self._bank_details.get_for_employee(employee_id), created
