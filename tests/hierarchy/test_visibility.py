from __future__ import annotations

import pytest

from tests.support import (
    ADMIN,
    BDE,
    BDM,
    DIRECT_BDE,
    FOREST,
    LONE_BDE,
    MANAGER,
    ORPHAN_BDM,
    OTHER_BDE,
    OTHER_BDM,
    OTHER_MANAGER,
    actor_for,
    employee,
)
from src.fieldforce.fieldforce.core.enums import Role
from src.fieldforce.fieldforce.core.exceptions import ForbiddenError, NotFoundError


@pytest.mark.parametrize(
    "employee_id, expected",
    [
        (MANAGER, {MANAGER, BDM, BDE, DIRECT_BDE}),
        (OTHER_MANAGER, {OTHER_MANAGER, OTHER_BDM, OTHER_BDE}),
        (BDM, {BDM, MANAGER, BDE}),
        (BDE, {BDE, BDM, MANAGER}),
        (DIRECT_BDE, {DIRECT_BDE, MANAGER}),
        (LONE_BDE, {LONE_BDE}),
        (ORPHAN_BDM, {ORPHAN_BDM}),
    ],
)
def test_visibility_closure_per_role(container, employee_id, expected):
    actor = actor_for(container, employee_id)
    assert container.visibility.visible_employee_ids(actor) == expected


def test_admin_sees_everyone(container):
    admin = actor_for(container, ADMIN)
    assert container.visibility.visible_employee_ids(admin) == {row[0] for row in FOREST}


def test_every_actor_sees_itself_and_non_admins_never_see_admins(container):
    admin_ids = {row[0] for row in FOREST if row[2] == Role.ADMIN}
    for row in FOREST:
        actor = actor_for(container, row[0])
        visible = container.visibility.visible_employee_ids(actor)
        assert actor.employee_id in visible
        if actor.role != Role.ADMIN:
            assert not visible & admin_ids


def test_visibility_is_stable_for_identical_state(container):
    actor = actor_for(container, MANAGER)
    first = container.visibility.visible_employee_ids(actor)
    assert all(container.visibility.visible_employee_ids(actor) == first for _ in range(5))


def test_bde_under_a_bdm_without_manager_link_is_still_reached_through_the_bdm(container):
    # BDE with only bdm_id set: the manager reaches it through its BDM.
    container.employees_repo.add(employee(11, "BDE00011", Role.BDE, bdm_id=BDM))
    assert 11 in container.visibility.visible_employee_ids(actor_for(container, MANAGER))
    assert 11 in container.visibility.visible_employee_ids(actor_for(container, BDM))


def test_visible_reports_of_filters_by_author(container):
    class Report:
        def __init__(self, bde_id):
            self.bde_id = bde_id

    reports = [Report(BDE), Report(OTHER_BDE), Report(DIRECT_BDE), Report(LONE_BDE)]
    kept = container.visibility.visible_reports_of(actor_for(container, MANAGER), reports)
    assert [r.bde_id for r in kept] == [BDE, DIRECT_BDE]


def test_require_visible_distinguishes_unknown_from_hidden(container):
    manager = actor_for(container, MANAGER)
    assert container.visibility.require_visible(manager, BDE).employee_id == BDE
    with pytest.raises(ForbiddenError):
        container.visibility.require_visible(manager, OTHER_BDE)
    with pytest.raises(NotFoundError):
        container.visibility.require_visible(manager, 999)


def test_can_manage_follows_direct_links(container):
    repo = container.employees_repo
    resolver = container.visibility
    assert resolver.can_manage(actor_for(container, ADMIN), repo.get_by_id(OTHER_BDE))
    assert resolver.can_manage(actor_for(container, MANAGER), repo.get_by_id(BDM))
    assert resolver.can_manage(actor_for(container, MANAGER), repo.get_by_id(BDE))
    assert not resolver.can_manage(actor_for(container, MANAGER), repo.get_by_id(OTHER_BDM))
    assert resolver.can_manage(actor_for(container, BDM), repo.get_by_id(BDE))
    assert not resolver.can_manage(actor_for(container, BDM), repo.get_by_id(DIRECT_BDE))
    assert not resolver.can_manage(actor_for(container, BDE), repo.get_by_id(BDE))


def test_build_hierarchy_for_admin_lists_unassigned(container):
    tree = container.visibility.build_hierarchy(actor_for(container, ADMIN))

    managers = {node["manager"]["employee_id"]: node for node in tree["managers"]}
    assert set(managers) == {MANAGER, OTHER_MANAGER}
    branch = managers[MANAGER]
    assert [n["bdm"]["employee_id"] for n in branch["bdms"]] == [BDM]
    assert [e["employee_id"] for e in branch["bdms"][0]["bdes"]] == [BDE]
    assert [e["employee_id"] for e in branch["direct_bdes"]] == [DIRECT_BDE]

    assert [n["bdm"]["employee_id"] for n in tree["unassigned_bdms"]] == [ORPHAN_BDM]
    assert [e["employee_id"] for e in tree["unassigned_bdes"]] == [LONE_BDE]


def test_build_hierarchy_for_manager_is_limited_to_branch(container):
    tree = container.visibility.build_hierarchy(actor_for(container, MANAGER))
    assert [node["manager"]["employee_id"] for node in tree["managers"]] == [MANAGER]
    assert tree["unassigned_bdms"] == []
    assert tree["unassigned_bdes"] == []
