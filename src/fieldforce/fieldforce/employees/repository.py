from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee rows and their hierarchy links.

    Note (DIP): services depend on this protocol, never on a concrete store.
    Link mutations are single atomic writes in every implementation.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[Employee]:
        raise NotImplementedError

    def list_by_manager(self, manager_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def list_by_bdm(self, bdm_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def search(self, query: str) -> Sequence[Employee]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_profile(self, employee_id: int, *, full_name: str, mobile: str, job_location: str) -> bool:
        raise NotImplementedError

    def set_manager(self, employee_id: int, *, manager_id: int) -> bool:
        """Point the employee at ``manager_id`` and clear its BDM link.

        BDEs whose ``bdm_id`` is this employee move to ``manager_id`` in the
        same write, so a BDM never leaves its team under the old manager.
        """

        raise NotImplementedError

    def set_bdm(self, employee_id: int, *, bdm_id: int) -> bool:
        """Link the employee under ``bdm_id`` and copy that BDM's manager.

        Returns False (and writes nothing) unless ``bdm_id`` is a BDM that has
        an existing manager at the moment of the write.
        """

        raise NotImplementedError

    def clear_links(self, employee_id: int) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError
