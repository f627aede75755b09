from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..bank_details.repository import BankDetailsRepository
from ..common.datetime_utils import now_local
from ..common.validators import optional_positive_int, require_min_length, require_non_empty
from ..core.constants import EMPLOYEE_CODE_DIGITS, MIN_MOBILE_LENGTH
from ..core.enums import Role
from ..core.exceptions import ForbiddenError, UnauthorizedError, ValidationError
from ..hierarchy.assignment import AssignmentManager
from ..hierarchy.visibility import VisibilityResolver
from ..sales.repository import SalesReportRepository
from ..verification.repository import VerificationReportRepository
from ..visits.repository import VisitReportRepository
from .model import Actor, Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def generate_employee_code(role: Role, now: datetime) -> str:
    """Role prefix plus the last digits of the millisecond timestamp, e.g. ``BDE48213``."""
    millis = int(now.timestamp()) * 1000 + now.microsecond // 1000
    return f"{role.code_prefix}{str(millis)[-EMPLOYEE_CODE_DIGITS:]}"


class EmployeeService:
    """Use case: register employees and read or edit them within the actor's reach."""

    def __init__(
        self,
        employees: EmployeeRepository,
        visibility: VisibilityResolver,
        assignments: AssignmentManager,
        *,
        sales: SalesReportRepository,
        verification: VerificationReportRepository,
        visits: VisitReportRepository,
        attendance: AttendanceRepository,
        bank_details: BankDetailsRepository,
    ):
        self._employees = employees
        self._visibility = visibility
        self._assignments = assignments
        self._sales = sales
        self._verification = verification
        self._visits = visits
        self._attendance = attendance
        self._bank_details = bank_details

    def _unique_code(self, role: Role, now: datetime) -> str:
        code = generate_employee_code(role, now)
        base = int(code[len(role.code_prefix):])
        modulus = 10**EMPLOYEE_CODE_DIGITS
        for step in range(modulus):
            if not self._employees.get_by_code(code):
                return code
            code = f"{role.code_prefix}{(base + step + 1) % modulus:0{EMPLOYEE_CODE_DIGITS}d}"
        raise ValidationError("No employee codes left for this role")

    def register(
        self,
        *,
        full_name: str,
        mobile: str,
        role: Role,
        job_location: str = "",
        manager_id: Optional[int] = None,
        bdm_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Employee:
        now = now or now_local()
        full_name = require_non_empty(full_name, "Name")
        mobile = require_min_length(mobile, "Mobile number", MIN_MOBILE_LENGTH)
        manager_id, bdm_id = self._assignments.validate_links(
            role=role,
            manager_id=optional_positive_int(manager_id, "Manager id"),
            bdm_id=optional_positive_int(bdm_id, "BDM id"),
        )

        employee_id = self._employees.create_employee(
            employee_code=self._unique_code(role, now),
            full_name=full_name,
            mobile=mobile,
            job_location=(job_location or "").strip(),
            role=role,
            manager_id=manager_id,
            bdm_id=bdm_id,
            created_at=now,
        )
        employee = self._employees.get_by_id(employee_id)
        logger.info("Registered %s %s as %s", role.value, employee_id, employee.employee_code)
        return employee

    def get(self, actor: Actor, employee_id: int) -> Employee:
        return self._visibility.require_visible(actor, employee_id)

    def list_for(self, actor: Actor) -> list[Employee]:
        return self._visibility.visible_employees(actor)

    def list_by_role(self, actor: Actor, role: Role) -> list[Employee]:
        return [e for e in self._visibility.visible_employees(actor) if e.role == role]

    def search(self, actor: Actor, query: str) -> list[Employee]:
        query = (query or "").strip()
        if not query:
            return self.list_for(actor)
        ids = self._visibility.visible_employee_ids(actor)
        return [e for e in self._employees.search(query) if e.employee_id in ids]

    def update_profile(
        self,
        actor: Actor,
        employee_id: int,
        *,
        full_name: Optional[str] = None,
        mobile: Optional[str] = None,
        job_location: Optional[str] = None,
    ) -> Employee:
        if actor.role == Role.BDE:
            raise UnauthorizedError("You don't have permission to update employees")

        target = self._visibility.require_visible(actor, employee_id)
        if not self._visibility.can_manage(actor, target):
            raise ForbiddenError("You can only update your own team members")

        new_name = require_non_empty(full_name, "Name") if full_name is not None else target.full_name
        new_mobile = (
            require_min_length(mobile, "Mobile number", MIN_MOBILE_LENGTH) if mobile is not None else target.mobile
        )
        new_location = job_location.strip() if job_location is not None else target.job_location

        self._employees.update_profile(
            target.employee_id,
            full_name=new_name,
            mobile=new_mobile,
            job_location=new_location,
        )
        logger.info("Profile of %s updated by %s", target.employee_id, actor.employee_id)
        return self._employees.get_by_id(target.employee_id)

    def _has_history(self, employee_id: int) -> bool:
        ids = [employee_id]
        return bool(
            self._sales.list_reports(bde_ids=ids)
            or self._verification.list_reports(bde_ids=ids)
            or self._visits.list_reports(bde_ids=ids)
            or self._attendance.list_records(employee_ids=ids)
        )

    def delete(self, actor: Actor, employee_id: int) -> None:
        """Remove an employee who has no team and no recorded work.

        Reports and attendance are kept for good, so anyone who ever filed
        one stays on record; detach them with ``remove_assignment`` instead.
        """
        if not actor.is_admin:
            raise UnauthorizedError("Only admins can delete employees")

        target = self._visibility.require_visible(actor, employee_id)
        if target.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")
        if self._employees.list_by_manager(target.employee_id) or self._employees.list_by_bdm(target.employee_id):
            raise ValidationError("Reassign this employee's team before deleting them")
        if self._has_history(target.employee_id):
            raise ValidationError("Employees with reports or attendance cannot be deleted")

        if not self._employees.delete_by_id(target.employee_id):
            raise ValidationError("Deleting employee failed")
        self._bank_details.delete_for_employee(target.employee_id)
        logger.info("Employee %s deleted by %s", target.employee_id, actor.employee_id)
