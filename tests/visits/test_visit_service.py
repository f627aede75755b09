from __future__ import annotations

from datetime import timedelta

import pytest

from src.fieldforce.fieldforce.core.enums import ProductType
from src.fieldforce.fieldforce.core.exceptions import UnauthorizedError, ValidationError
from tests.support import BDE, BDM, DIRECT_BDE, MANAGER, NOW, OTHER_BDE, OTHER_MANAGER, actor_for


def log_visit(container, bde_id=BDE, *, now=NOW, products=("soundbox", "matm"), **overrides):
    fields = dict(
        store_name="Shree Kirana",
        owner_name="Ramesh",
        location="Kothrud, Pune",
        phone_number="9876543210",
        photo_url="media/store.jpg",
        products_interested=list(products),
    )
    fields.update(overrides)
    return container.visit_service.create(actor_for(container, bde_id), now=now, **fields)


def test_bde_logs_visit_with_products(container):
    visit = log_visit(container, products=["soundbox", "matm", "soundbox"])
    assert visit.bde_id == BDE
    assert visit.products_interested == (ProductType.SOUNDBOX, ProductType.MATM)
    assert visit.to_dict()["products_interested"] == ["soundbox", "matm"]


def test_visit_requires_products_and_known_types(container):
    with pytest.raises(ValidationError):
        log_visit(container, products=[])
    with pytest.raises(ValidationError):
        log_visit(container, products=["laptop"])
    with pytest.raises(ValidationError):
        log_visit(container, store_name=" ")


def test_only_bdes_log_visits(container):
    with pytest.raises(UnauthorizedError):
        log_visit(container, BDM)


def test_today_count_and_listing_are_team_scoped(container):
    log_visit(container, BDE)
    log_visit(container, DIRECT_BDE)
    log_visit(container, BDE, now=NOW - timedelta(days=1))
    log_visit(container, OTHER_BDE)

    manager = actor_for(container, MANAGER)
    assert container.visit_service.today_count(manager, now=NOW) == 2
    assert container.visit_service.today_count(actor_for(container, OTHER_MANAGER), now=NOW) == 1
    assert container.visit_service.today_count(actor_for(container, BDE), now=NOW) == 1
    assert len(container.visit_service.list_for(manager)) == 3


def test_search_by_location_ignores_case_and_stays_in_team(container):
    kothrud = log_visit(container)
    log_visit(container, DIRECT_BDE, location="Andheri, Mumbai")
    log_visit(container, OTHER_BDE, location="kothrud depot")

    manager = actor_for(container, MANAGER)
    assert [v.report_id for v in container.visit_service.search_by_location(manager, "KOTHRUD")] == [kothrud.report_id]
    assert container.visit_service.search_by_location(actor_for(container, OTHER_MANAGER), "andheri") == []
    with pytest.raises(ValidationError):
        container.visit_service.search_by_location(manager, "")


def test_list_between_spans_inclusive_days(container):
    inside = log_visit(container, now=NOW + timedelta(days=1))
    log_visit(container, now=NOW - timedelta(days=1))
    log_visit(container, now=NOW + timedelta(days=2))

    bde = actor_for(container, BDE)
    found = container.visit_service.list_between(bde, start=NOW.date(), end=NOW.date() + timedelta(days=1))
    assert [v.report_id for v in found] == [inside.report_id]
    with pytest.raises(ValidationError):
        container.visit_service.list_between(bde, start=NOW.date(), end=NOW.date() - timedelta(days=1))
