from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Role
from .model import Employee
from .repository import EmployeeRepository


class InMemoryEmployeeRepository(EmployeeRepository):
    """Process-local store used for development and tests.

    One lock guards every method, so each call is atomic like a single SQL
    statement would be.
    """

    def __init__(self, employees: Sequence[Employee] = ()):
        self._lock = threading.RLock()
        self._rows: dict[int, Employee] = {e.employee_id: e for e in employees}
        self._next_id = max(self._rows, default=0) + 1

    def add(self, employee: Employee) -> Employee:
        """Insert a fully-formed row as-is (seeding helper, ids stay monotonic)."""
        with self._lock:
            self._rows[employee.employee_id] = employee
            self._next_id = max(self._next_id, employee.employee_id + 1)
            return employee

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with self._lock:
            return self._rows.get(int(employee_id))

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        with self._lock:
            return next((e for e in self._rows.values() if e.employee_code == employee_code), None)

    def list_all(self) -> Sequence[Employee]:
        with self._lock:
            return sorted(self._rows.values(), key=lambda e: e.employee_id)

    def list_by_role(self, role: Role) -> Sequence[Employee]:
        return [e for e in self.list_all() if e.role == role]

    def list_by_manager(self, manager_id: int) -> Sequence[Employee]:
        return [e for e in self.list_all() if e.manager_id == manager_id]

    def list_by_bdm(self, bdm_id: int) -> Sequence[Employee]:
        return [e for e in self.list_all() if e.bdm_id == bdm_id]

    def search(self, query: str) -> Sequence[Employee]:
        q = query.lower()
        return [
            e
            for e in self.list_all()
            if q in e.full_name.lower()
            or q in e.employee_code.lower()
            or q in e.mobile
            or q in e.job_location.lower()
        ]

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
        with self._lock:
            employee_id = self._next_id
            self._next_id += 1
            self._rows[employee_id] = Employee(
                employee_id=employee_id,
                employee_code=employee_code,
                full_name=full_name,
                mobile=mobile,
                job_location=job_location,
                role=role,
                manager_id=manager_id,
                bdm_id=bdm_id,
                created_at=created_at,
            )
            return employee_id

    def _update(self, employee_id: int, **changes) -> bool:
        with self._lock:
            current = self._rows.get(int(employee_id))
            if current is None:
                return False
            self._rows[current.employee_id] = replace(current, **changes)
            return True

    def update_profile(self, employee_id: int, *, full_name: str, mobile: str, job_location: str) -> bool:
        return self._update(employee_id, full_name=full_name, mobile=mobile, job_location=job_location)

    def set_manager(self, employee_id: int, *, manager_id: int) -> bool:
        with self._lock:
            if not self._update(employee_id, manager_id=int(manager_id), bdm_id=None):
                return False
            for report in self.list_by_bdm(int(employee_id)):
                self._rows[report.employee_id] = replace(report, manager_id=int(manager_id))
            return True

    def set_bdm(self, employee_id: int, *, bdm_id: int) -> bool:
        with self._lock:
            bdm = self._rows.get(int(bdm_id))
            if bdm is None or bdm.role != Role.BDM:
                return False
            manager = self._rows.get(bdm.manager_id)
            if manager is None or manager.role != Role.MANAGER:
                return False
            return self._update(employee_id, manager_id=bdm.manager_id, bdm_id=bdm.employee_id)

    def clear_links(self, employee_id: int) -> bool:
        return self._update(employee_id, manager_id=None, bdm_id=None)

    def delete_by_id(self, employee_id: int) -> bool:
        with self._lock:
            return self._rows.pop(int(employee_id), None) is not None
