from __future__ import annotations

from typing import Iterable, Optional, TypeVar

from ..core.enums import Role
from ..core.exceptions import ForbiddenError, NotFoundError
from ..employees.model import Actor, Employee
from ..employees.repository import EmployeeRepository

R = TypeVar("R")


class VisibilityResolver:
    """Computes which employees (and their reports) an actor may observe.

    Holds no state of its own: every answer is recomputed from the stored
    ``manager_id`` / ``bdm_id`` links, so identical hierarchy state always
    yields identical results.
    """

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def visible_employee_ids(self, actor: Actor) -> set[int]:
        if actor.role == Role.ADMIN:
            return {e.employee_id for e in self._employees.list_all()} | {actor.employee_id}

        visible = {actor.employee_id}

        if actor.role == Role.MANAGER:
            direct = self._employees.list_by_manager(actor.employee_id)
            bdm_ids = {e.employee_id for e in direct if e.role == Role.BDM}
            visible |= bdm_ids
            visible |= {e.employee_id for e in direct if e.role == Role.BDE}
            for bdm_id in bdm_ids:
                visible |= {e.employee_id for e in self._employees.list_by_bdm(bdm_id) if e.role == Role.BDE}

        elif actor.role == Role.BDM:
            me = self._employees.get_by_id(actor.employee_id)
            manager = self._linked(me.manager_id if me else None, Role.MANAGER)
            if manager:
                visible.add(manager.employee_id)
            visible |= {e.employee_id for e in self._employees.list_by_bdm(actor.employee_id) if e.role == Role.BDE}

        elif actor.role == Role.BDE:
            me = self._employees.get_by_id(actor.employee_id)
            if me:
                for supervisor in (self._linked(me.bdm_id, Role.BDM), self._linked(me.manager_id, Role.MANAGER)):
                    if supervisor:
                        visible.add(supervisor.employee_id)

        return visible

    def _linked(self, employee_id: Optional[int], role: Role) -> Optional[Employee]:
        if employee_id is None:
            return None
        employee = self._employees.get_by_id(employee_id)
        if employee is None or employee.role != role:
            return None
        return employee

    def visible_employees(self, actor: Actor) -> list[Employee]:
        ids = self.visible_employee_ids(actor)
        return [e for e in self._employees.list_all() if e.employee_id in ids]

    def visible_reports_of(self, actor: Actor, reports: Iterable[R]) -> list[R]:
        """Keep the reports whose author (``bde_id``) is inside the actor's closure."""
        ids = self.visible_employee_ids(actor)
        return [r for r in reports if getattr(r, "bde_id") in ids]

    def can_view(self, actor: Actor, employee_id: int) -> bool:
        return int(employee_id) in self.visible_employee_ids(actor)

    def require_visible(self, actor: Actor, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if employee is None:
            raise NotFoundError("Employee not found")
        if not self.can_view(actor, employee.employee_id):
            raise ForbiddenError("This employee is outside your team")
        return employee

    @staticmethod
    def can_manage(actor: Actor, target: Employee) -> bool:
        """Whether ``actor`` may edit ``target``'s profile.

        Managers edit their direct reports, BDMs their own BDEs, BDEs nobody.
        """
        if actor.role == Role.ADMIN:
            return True
        if actor.role == Role.MANAGER:
            return target.manager_id == actor.employee_id
        if actor.role == Role.BDM:
            return target.bdm_id == actor.employee_id
        return False

    def build_hierarchy(self, actor: Actor) -> dict:
        """Nested view of the visible forest.

        BDMs without a visible manager, and BDEs that fit under no visible
        node, are listed as unassigned.
        """
        visible = self.visible_employees(actor)
        managers = [e for e in visible if e.role == Role.MANAGER]
        bdms = [e for e in visible if e.role == Role.BDM]
        bdes = [e for e in visible if e.role == Role.BDE]
        manager_ids = {m.employee_id for m in managers}
        placed: set[int] = set()

        def bdm_node(bdm: Employee) -> dict:
            children = [e for e in bdes if e.bdm_id == bdm.employee_id]
            placed.update(e.employee_id for e in children)
            return {"bdm": bdm.to_dict(), "bdes": [e.to_dict() for e in children]}

        tree = []
        for manager in managers:
            own_bdms = [b for b in bdms if b.manager_id == manager.employee_id]
            bdm_nodes = [bdm_node(b) for b in own_bdms]
            direct = [e for e in bdes if e.manager_id == manager.employee_id and e.employee_id not in placed]
            placed.update(e.employee_id for e in direct)
            tree.append({"manager": manager.to_dict(), "bdms": bdm_nodes, "direct_bdes": [e.to_dict() for e in direct]})

        orphan_bdms = [bdm_node(b) for b in bdms if b.manager_id not in manager_ids]
        return {
            "managers": tree,
            "unassigned_bdms": orphan_bdms,
            "unassigned_bdes": [e.to_dict() for e in bdes if e.employee_id not in placed],
        }
