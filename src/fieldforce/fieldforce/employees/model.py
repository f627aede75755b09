from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: one account in the Manager -> BDM -> BDE forest.

    Only ``manager_id`` and ``bdm_id`` carry hierarchy; nothing else is
    denormalized, so every closure is recomputed from these two links.
    """

    employee_id: int
    employee_code: str
    full_name: str
    mobile: str
    role: Role
    job_location: str = ""
    manager_id: Optional[int] = None
    bdm_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_code": self.employee_code,
            "full_name": self.full_name,
            "mobile": self.mobile,
            "job_location": self.job_location,
            "role": self.role.value,
            "manager_id": self.manager_id,
            "bdm_id": self.bdm_id,
        }


@dataclass(frozen=True)
class Actor:
    """Already-authenticated caller, as handed over by the session layer."""

    employee_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
