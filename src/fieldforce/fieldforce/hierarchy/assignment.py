from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_positive_int
from ..core.enums import Role
from ..core.exceptions import (
    InvalidTargetError,
    NotFoundError,
    OrphanSupervisorError,
    UnauthorizedError,
    ValidationError,
)
from ..employees.model import Actor, Employee
from ..employees.repository import EmployeeRepository

logger = logging.getLogger(__name__)


class AssignmentManager:
    """Use case: mutate hierarchy edges (admin only).

    Structural rules are checked here whoever the caller is; the store then
    performs each link change as one atomic write.
    """

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise UnauthorizedError("Only admins can change reporting lines")

    def _get(self, employee_id: int, label: str = "Employee") -> Employee:
        employee = self._employees.get_by_id(require_positive_int(employee_id, f"{label} id"))
        if employee is None:
            raise NotFoundError(f"{label} not found")
        return employee

    def _require_managed_bdm(self, bdm: Employee) -> None:
        """A BDM can take BDEs only while it reports to an existing manager."""
        if bdm.role != Role.BDM:
            raise InvalidTargetError("Target is not a BDM")
        if bdm.manager_id is None:
            raise OrphanSupervisorError("BDM has no manager assigned")
        manager = self._employees.get_by_id(bdm.manager_id)
        if manager is None or manager.role != Role.MANAGER:
            raise OrphanSupervisorError("BDM's manager no longer exists")

    def assign_to_manager(self, actor: Actor, *, employee_id: int, manager_id: int) -> Employee:
        self._require_admin(actor)
        employee = self._get(employee_id)
        manager = self._get(manager_id, "Manager")

        if manager.role != Role.MANAGER:
            raise InvalidTargetError("Target is not a manager")
        if employee.role not in {Role.BDM, Role.BDE}:
            raise InvalidTargetError("Only BDMs and BDEs can report to a manager")

        if not self._employees.set_manager(employee.employee_id, manager_id=manager.employee_id):
            raise NotFoundError("Employee not found")
        if employee.role == Role.BDM:
            moved = [e.employee_id for e in self._employees.list_by_bdm(employee.employee_id)]
            if moved:
                logger.info("BDEs %s followed BDM %s to manager %s", moved, employee.employee_id, manager.employee_id)

        logger.info(
            "Employee %s assigned to manager %s by %s (previous manager=%s bdm=%s)",
            employee.employee_id,
            manager.employee_id,
            actor.employee_id,
            employee.manager_id,
            employee.bdm_id,
        )
        return self._get(employee.employee_id)

    def assign_to_bdm(self, actor: Actor, *, employee_id: int, bdm_id: int) -> Employee:
        self._require_admin(actor)
        employee = self._get(employee_id)
        bdm = self._get(bdm_id, "BDM")

        self._require_managed_bdm(bdm)
        if employee.role != Role.BDE:
            raise InvalidTargetError("Only BDEs can report to a BDM")

        if not self._employees.set_bdm(employee.employee_id, bdm_id=bdm.employee_id):
            # The BDM changed between the read and the write; report the state we now see.
            self._require_managed_bdm(self._get(bdm_id, "BDM"))
            raise NotFoundError("Employee not found")

        updated = self._get(employee.employee_id)
        logger.info(
            "Employee %s assigned to BDM %s (manager %s) by %s",
            updated.employee_id,
            updated.bdm_id,
            updated.manager_id,
            actor.employee_id,
        )
        return updated

    def remove_assignment(self, actor: Actor, *, employee_id: int) -> Employee:
        """Clear both links of ``employee_id``.

        Does not cascade: BDEs that point at a detached BDM keep their
        ``bdm_id``, and stop being reachable from the BDM's former manager
        through that BDM.
        """
        self._require_admin(actor)
        employee = self._get(employee_id)

        if not self._employees.clear_links(employee.employee_id):
            raise NotFoundError("Employee not found")

        if employee.role == Role.BDM:
            stranded = [e.employee_id for e in self._employees.list_by_bdm(employee.employee_id)]
            if stranded:
                logger.warning(
                    "BDM %s detached from manager %s while BDEs %s still report to it",
                    employee.employee_id,
                    employee.manager_id,
                    stranded,
                )

        logger.info("Employee %s detached by %s", employee.employee_id, actor.employee_id)
        return self._get(employee.employee_id)

    def validate_links(self, *, role: Role, manager_id: Optional[int], bdm_id: Optional[int]) -> tuple[Optional[int], Optional[int]]:
        """Check links requested for a new employee; returns the links to store.

        A BDE given a BDM inherits that BDM's manager, the same way
        ``assign_to_bdm`` does.
        """
        if role in {Role.ADMIN, Role.MANAGER}:
            if manager_id is not None or bdm_id is not None:
                raise ValidationError("Admins and managers cannot report to anyone")
            return None, None

        if role == Role.BDM and bdm_id is not None:
            raise ValidationError("A BDM cannot report to another BDM")

        if bdm_id is not None:
            bdm = self._get(bdm_id, "BDM")
            self._require_managed_bdm(bdm)
            if manager_id is not None and require_positive_int(manager_id, "Manager id") != bdm.manager_id:
                raise InvalidTargetError("BDM belongs to a different manager")
            return bdm.manager_id, bdm.employee_id

        if manager_id is not None:
            manager = self._get(manager_id, "Manager")
            if manager.role != Role.MANAGER:
                raise InvalidTargetError("Target is not a manager")
            return manager.employee_id, None

        return None, None
