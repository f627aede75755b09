from __future__ import annotations

from datetime import datetime

import pytest

from src.fieldforce.fieldforce.core.enums import Role
from src.fieldforce.fieldforce.core.exceptions import (
    ForbiddenError,
    NotFoundError,
    OrphanSupervisorError,
    UnauthorizedError,
    ValidationError,
)
from src.fieldforce.fieldforce.employees.service import generate_employee_code
from tests.support import (
    ADMIN,
    BDE,
    BDM,
    DIRECT_BDE,
    LONE_BDE,
    MANAGER,
    NOW,
    ORPHAN_BDM,
    OTHER_BDE,
    OTHER_MANAGER,
    actor_for,
)


def test_generate_employee_code_uses_role_prefix_and_last_millis_digits():
    now = datetime.fromtimestamp(1_700_000_012).replace(microsecond=345_000)
    assert generate_employee_code(Role.BDE, now) == "BDE12345"
    assert generate_employee_code(Role.ADMIN, now) == "AD12345"


def test_register_bde_under_bdm_inherits_manager(container):
    created = container.employee_service.register(
        full_name="  Asha Patil ",
        mobile="9876543210",
        role=Role.BDE,
        job_location="Nashik",
        bdm_id=BDM,
        now=NOW,
    )
    assert created.full_name == "Asha Patil"
    assert created.employee_code.startswith("BDE")
    assert (created.manager_id, created.bdm_id) == (MANAGER, BDM)
    assert created.employee_id in container.visibility.visible_employee_ids(actor_for(container, MANAGER))


def test_register_twice_in_same_millisecond_gets_distinct_codes(container):
    first = container.employee_service.register(full_name="One", mobile="9876543210", role=Role.BDM, now=NOW)
    second = container.employee_service.register(full_name="Two", mobile="9876543211", role=Role.BDM, now=NOW)
    assert first.employee_code != second.employee_code
    assert second.employee_id > first.employee_id


def test_register_validates_fields_and_links(container):
    with pytest.raises(ValidationError):
        container.employee_service.register(full_name="", mobile="9876543210", role=Role.BDE, now=NOW)
    with pytest.raises(ValidationError):
        container.employee_service.register(full_name="Short", mobile="12345", role=Role.BDE, now=NOW)
    with pytest.raises(OrphanSupervisorError):
        container.employee_service.register(
            full_name="Nobody", mobile="9876543210", role=Role.BDE, bdm_id=ORPHAN_BDM, now=NOW
        )


def test_get_respects_visibility(container):
    bdm = actor_for(container, BDM)
    assert container.employee_service.get(bdm, BDE).employee_id == BDE
    with pytest.raises(ForbiddenError):
        container.employee_service.get(bdm, OTHER_BDE)
    with pytest.raises(NotFoundError):
        container.employee_service.get(bdm, 404)


def test_list_search_and_role_filter_stay_inside_closure(container):
    manager = actor_for(container, MANAGER)
    assert {e.employee_id for e in container.employee_service.list_for(manager)} == {MANAGER, BDM, BDE, DIRECT_BDE}
    assert [e.employee_id for e in container.employee_service.list_by_role(manager, Role.BDE)] == [BDE, DIRECT_BDE]
    assert [e.employee_id for e in container.employee_service.search(manager, "BDE0000")] == [BDE, DIRECT_BDE]
    assert container.employee_service.search(manager, "BDE00008") == []


def test_manager_edits_own_branch_only(container):
    manager = actor_for(container, MANAGER)
    updated = container.employee_service.update_profile(manager, BDE, job_location="Mumbai")
    assert updated.job_location == "Mumbai"
    assert updated.full_name == "Employee 6"

    with pytest.raises(ForbiddenError):
        container.employee_service.update_profile(manager, OTHER_BDE, job_location="Mumbai")


def test_bdm_edits_own_bdes_but_not_manager_direct_reports(container):
    bdm = actor_for(container, BDM)
    assert container.employee_service.update_profile(bdm, BDE, mobile="9000011111").mobile == "9000011111"
    with pytest.raises(ForbiddenError):
        container.employee_service.update_profile(bdm, MANAGER, full_name="Renamed")


def test_bde_cannot_edit_profiles(container):
    with pytest.raises(UnauthorizedError):
        container.employee_service.update_profile(actor_for(container, BDE), BDE, full_name="Me")


def test_delete_is_admin_only_and_spares_admins(container):
    admin = actor_for(container, ADMIN)
    with pytest.raises(UnauthorizedError):
        container.employee_service.delete(actor_for(container, OTHER_MANAGER), OTHER_BDE)
    with pytest.raises(ValidationError):
        container.employee_service.delete(admin, ADMIN)

    container.employee_service.delete(admin, OTHER_BDE)
    assert container.employees_repo.get_by_id(OTHER_BDE) is None


def test_delete_refuses_supervisors_that_still_have_a_team(container):
    admin = actor_for(container, ADMIN)
    with pytest.raises(ValidationError):
        container.employee_service.delete(admin, MANAGER)
    with pytest.raises(ValidationError):
        container.employee_service.delete(admin, BDM)
    assert container.employees_repo.get_by_id(MANAGER) is not None

    # The BDM still has a live manager, so new BDEs land under an existing one.
    placed = container.assignments.assign_to_bdm(admin, employee_id=LONE_BDE, bdm_id=BDM)
    assert container.employees_repo.get_by_id(placed.manager_id).role == Role.MANAGER


def test_delete_keeps_employees_with_recorded_work(container, soundbox):
    admin = actor_for(container, ADMIN)
    container.sales_service.create(
        actor_for(container, DIRECT_BDE),
        merchant_name="Sai Traders",
        merchant_mobile="9876543210",
        location="Pune",
        amount=999,
        transaction_id="TXN-1",
        payment_mode="upi",
        product_id=soundbox.product_id,
        now=NOW,
    )
    container.attendance_service.record_login(OTHER_BDE, now=NOW)

    for employee_id in (DIRECT_BDE, OTHER_BDE):
        with pytest.raises(ValidationError):
            container.employee_service.delete(admin, employee_id)
    assert len(container.sales_repo.list_reports(bde_ids=[DIRECT_BDE])) == 1


def test_delete_drops_bank_details(container):
    admin = actor_for(container, ADMIN)
    container.bank_details_service.save(
        admin, LONE_BDE, bank_name="State Bank", ifsc_code="SBIN0000123", account_number="123456789", now=NOW
    )
    container.employee_service.delete(admin, LONE_BDE)
    assert container.bank_details_repo.get_for_employee(LONE_BDE) is None


@pytest.mark.parametrize("links", [{"manager_id": "abc"}, {"bdm_id": "four"}, {"manager_id": -2}])
def test_register_rejects_malformed_link_ids(container, links):
    with pytest.raises(ValidationError):
        container.employee_service.register(full_name="New Hire", mobile="9876543210", role=Role.BDE, now=NOW, **links)


def test_register_treats_blank_link_ids_as_unset(container):
    hire = container.employee_service.register(
        full_name="New Hire", mobile="9876543210", role=Role.BDE, manager_id="", bdm_id=None, now=NOW
    )
    assert (hire.manager_id, hire.bdm_id) == (None, None)
