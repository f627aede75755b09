from __future__ import annotations

from datetime import datetime

from src.fieldforce.fieldforce.container import Container
from src.fieldforce.fieldforce.core.enums import Role
from src.fieldforce.fieldforce.employees.model import Actor, Employee

NOW = datetime(2026, 3, 10, 9, 30)

# id, code, role, manager_id, bdm_id
FOREST = [
    (1, "AD00001", Role.ADMIN, None, None),
    (2, "M00002", Role.MANAGER, None, None),
    (3, "M00003", Role.MANAGER, None, None),
    (4, "BDM00004", Role.BDM, 2, None),
    (5, "BDM00005", Role.BDM, 3, None),
    (6, "BDE00006", Role.BDE, 2, 4),
    (7, "BDE00007", Role.BDE, 2, None),
    (8, "BDE00008", Role.BDE, 3, 5),
    (9, "BDE00009", Role.BDE, None, None),
    (10, "BDM00010", Role.BDM, None, None),
]

ADMIN, MANAGER, OTHER_MANAGER, BDM, OTHER_BDM, BDE, DIRECT_BDE, OTHER_BDE, LONE_BDE, ORPHAN_BDM = range(1, 11)


def employee(employee_id, code, role, manager_id=None, bdm_id=None) -> Employee:
    return Employee(
        employee_id=employee_id,
        employee_code=code,
        full_name=f"Employee {employee_id}",
        mobile=f"98765{employee_id:05d}",
        role=role,
        job_location="Pune",
        manager_id=manager_id,
        bdm_id=bdm_id,
        created_at=datetime(2026, 1, 1),
    )


def actor_for(container: Container, employee_id: int) -> Actor:
    e = container.employees_repo.get_by_id(employee_id)
    return Actor(employee_id=e.employee_id, role=e.role)
