from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

import pytest

from src.fieldforce.fieldforce.core.enums import ReportStatus
from src.fieldforce.fieldforce.core.exceptions import (
    AlreadyResubmittedError,
    ForbiddenError,
    NotOwnerError,
    NotPendingError,
    NotRejectedError,
    UnauthorizedError,
    ValidationError,
)
from tests.support import ADMIN, BDE, BDM, DIRECT_BDE, MANAGER, NOW, OTHER_BDE, actor_for

VALUES = {
    "merchant_name": "Sai Traders",
    "mobile_number": "9876543210",
    "business_name": "Sai General Store",
    "full_address": "12 MG Road, Pune",
    "verification_video": "media/v1.mp4",
    "shop_photo": "media/shop.jpg",
    "shop_owner_photo": "media/owner.jpg",
    "aadhaar_card_photo": "media/aadhaar.jpg",
    "pan_card_photo": "media/pan.jpg",
    "store_outside_photo": "media/outside.jpg",
}


def submit(container, bde_id=BDE, *, now=NOW, **overrides):
    return container.verification_service.create(actor_for(container, bde_id), values={**VALUES, **overrides}, now=now)


def reject(container, report_id, reason="Blurry PAN card"):
    return container.verification_service.reject(actor_for(container, ADMIN), report_id, reason=reason, now=NOW)


def test_bde_submits_pending_report(container):
    report = submit(container)
    assert report.bde_id == BDE
    assert report.status == ReportStatus.PENDING
    assert report.details.business_name == "Sai General Store"
    assert report.resubmitted_from is None


def test_every_field_is_required(container):
    with pytest.raises(ValidationError):
        submit(container, pan_card_photo="")
    with pytest.raises(ValidationError):
        submit(container, mobile_number="98765")
    with pytest.raises(UnauthorizedError):
        submit(container, BDM)


def test_approve_then_nothing_else(container):
    report = submit(container)
    approved = container.verification_service.approve(actor_for(container, ADMIN), report.report_id, now=NOW)
    assert approved.status == ReportStatus.APPROVED
    with pytest.raises(NotPendingError):
        reject(container, report.report_id)
    with pytest.raises(NotRejectedError):
        container.verification_service.resubmit(actor_for(container, BDE), report.report_id, values=VALUES, now=NOW)


def test_reject_then_resubmit_creates_new_pending_record(container):
    original = submit(container)
    reject(container, original.report_id, reason="Blurry PAN card")

    later = NOW + timedelta(hours=2)
    fresh = container.verification_service.resubmit(
        actor_for(container, BDE),
        original.report_id,
        values={**VALUES, "pan_card_photo": "media/pan-v2.jpg"},
        now=later,
    )

    assert fresh.report_id != original.report_id
    assert fresh.status == ReportStatus.PENDING
    assert fresh.resubmitted_from == original.report_id
    assert fresh.details.pan_card_photo == "media/pan-v2.jpg"
    assert fresh.created_at == later

    kept = container.verification_repo.get_by_id(original.report_id)
    assert kept.status == ReportStatus.REJECTED
    assert kept.rejection_reason == "Blurry PAN card"
    assert kept.details.pan_card_photo == "media/pan.jpg"


def test_resubmit_preconditions(container):
    pending = submit(container)
    with pytest.raises(NotRejectedError):
        container.verification_service.resubmit(actor_for(container, BDE), pending.report_id, values=VALUES, now=NOW)

    reject(container, pending.report_id)
    with pytest.raises(NotOwnerError):
        container.verification_service.resubmit(
            actor_for(container, DIRECT_BDE), pending.report_id, values=VALUES, now=NOW
        )

    container.verification_service.resubmit(actor_for(container, BDE), pending.report_id, values=VALUES, now=NOW)
    with pytest.raises(AlreadyResubmittedError):
        container.verification_service.resubmit(actor_for(container, BDE), pending.report_id, values=VALUES, now=NOW)


def test_resubmission_can_itself_be_rejected_and_resubmitted(container):
    first = submit(container)
    reject(container, first.report_id)
    second = container.verification_service.resubmit(actor_for(container, BDE), first.report_id, values=VALUES, now=NOW)
    reject(container, second.report_id, reason="Video missing")
    third = container.verification_service.resubmit(actor_for(container, BDE), second.report_id, values=VALUES, now=NOW)
    assert third.resubmitted_from == second.report_id


def test_listing_status_filter_and_search(container):
    mine = submit(container)
    other = submit(container, OTHER_BDE, merchant_name="Kumar Electronics", full_address="Baner, Pune")
    reject(container, mine.report_id)

    manager = actor_for(container, MANAGER)
    assert [r.report_id for r in container.verification_service.list_for(manager)] == [mine.report_id]
    assert [
        r.report_id for r in container.verification_service.list_by_status(manager, ReportStatus.REJECTED)
    ] == [mine.report_id]
    assert container.verification_service.list_by_status(manager, ReportStatus.PENDING) == []

    admin = actor_for(container, ADMIN)
    assert [r.report_id for r in container.verification_service.search(admin, "kumar")] == [other.report_id]
    assert container.verification_service.search(manager, "kumar") == []
    assert [r.report_id for r in container.verification_service.list_pending(admin)] == [other.report_id]

    with pytest.raises(ForbiddenError):
        container.verification_service.get(manager, other.report_id)
    with pytest.raises(UnauthorizedError):
        container.verification_service.list_pending(manager)


def test_list_between_covers_whole_days_inside_the_team(container):
    before = submit(container, now=NOW - timedelta(days=3))
    first_day = submit(container, now=NOW.replace(hour=0, minute=0))
    last_day = submit(container, now=NOW + timedelta(days=1, hours=14))
    submit(container, now=NOW + timedelta(days=2))
    other = submit(container, OTHER_BDE, now=NOW)

    manager = actor_for(container, MANAGER)
    found = container.verification_service.list_between(manager, start=NOW.date(), end=NOW.date() + timedelta(days=1))
    assert [r.report_id for r in found] == [last_day.report_id, first_day.report_id]
    assert before.report_id not in {r.report_id for r in found}
    assert other.report_id not in {r.report_id for r in found}

    with pytest.raises(ValidationError):
        container.verification_service.list_between(manager, start=date(2026, 3, 10), end=date(2026, 3, 9))
    with pytest.raises(ValidationError):
        container.verification_service.list_between(manager, start=None, end=date(2026, 3, 9))


def test_concurrent_resubmissions_create_one_replacement(container):
    original = submit(container)
    reject(container, original.report_id)
    bde = actor_for(container, BDE)
    barrier = threading.Barrier(8)

    def attempt(_):
        barrier.wait()
        try:
            return container.verification_service.resubmit(bde, original.report_id, values=VALUES, now=NOW)
        except AlreadyResubmittedError:
            return None

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(attempt, range(8)))

    assert len([r for r in results if r is not None]) == 1
    replacements = [
        r for r in container.verification_service.list_for(bde) if r.resubmitted_from == original.report_id
    ]
    assert len(replacements) == 1
