from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

import pytest

from src.fieldforce.fieldforce.attendance.model import AttendanceRecord
from src.fieldforce.fieldforce.attendance.service import AttendanceService
from src.fieldforce.fieldforce.core.enums import AttendanceStatus
from src.fieldforce.fieldforce.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from tests.support import ADMIN, BDE, BDM, DIRECT_BDE, MANAGER, NOW, OTHER_BDE, actor_for


def test_login_is_idempotent_per_day(container):
    service = container.attendance_service
    first = service.record_login(BDE, now=NOW)
    second = service.record_login(BDE, now=NOW + timedelta(hours=1))

    assert second == first
    assert second.login_time == NOW
    assert len(container.attendance_repo.list_records(employee_ids=[BDE])) == 1


def test_login_after_logout_returns_closed_record_unchanged(container):
    service = container.attendance_service
    service.record_login(BDE, now=NOW)
    closed = service.record_logout(BDE, now=NOW + timedelta(hours=8))

    again = service.record_login(BDE, now=NOW + timedelta(hours=9))
    assert again == closed
    assert service.status_of(again) == AttendanceStatus.PRESENT


def test_new_day_opens_new_record(container):
    service = container.attendance_service
    today = service.record_login(BDE, now=NOW)
    tomorrow = service.record_login(BDE, now=NOW + timedelta(days=1))
    assert tomorrow.attendance_id != today.attendance_id
    assert tomorrow.work_date == date(2026, 3, 11)


def test_logout_without_session_returns_none(container):
    service = container.attendance_service
    assert service.record_logout(BDE, now=NOW) is None

    service.record_login(BDE, now=NOW)
    assert service.record_logout(BDE, now=NOW + timedelta(hours=8)).logout_time == NOW + timedelta(hours=8)
    assert service.record_logout(BDE, now=NOW + timedelta(hours=9)) is None


def test_login_for_unknown_employee(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.record_login(999, now=NOW)


def test_status_labels():
    open_record = AttendanceRecord(1, BDE, NOW.date(), NOW)
    closed = AttendanceRecord(1, BDE, NOW.date(), NOW, NOW + timedelta(hours=8))

    assert AttendanceService.status_of(None).label == "Absent"
    assert AttendanceService.status_of(open_record).label == "Logged In"
    assert AttendanceService.status_of(closed).label == "Present"


def test_daily_overview_covers_visible_team(container):
    service = container.attendance_service
    service.record_login(BDE, now=NOW)
    service.record_login(DIRECT_BDE, now=NOW)
    service.record_logout(DIRECT_BDE, now=NOW + timedelta(hours=8))
    service.record_login(OTHER_BDE, now=NOW)

    rows = service.daily_overview(actor_for(container, MANAGER), NOW.date())
    statuses = {row["employee"]["employee_id"]: row["status_label"] for row in rows}
    assert statuses == {
        MANAGER: "Absent",
        BDM: "Absent",
        BDE: "Logged In",
        DIRECT_BDE: "Present",
    }


def test_history_and_range_are_visibility_checked(container):
    service = container.attendance_service
    for offset in range(3):
        service.record_login(BDE, now=NOW + timedelta(days=offset))
    service.record_login(OTHER_BDE, now=NOW)

    manager = actor_for(container, MANAGER)
    history = service.history(manager, BDE)
    assert [r.work_date for r in history] == [date(2026, 3, 12), date(2026, 3, 11), date(2026, 3, 10)]
    with pytest.raises(ForbiddenError):
        service.history(manager, OTHER_BDE)

    window = service.records_between(manager, date(2026, 3, 10), date(2026, 3, 11))
    assert {(r.employee_id, r.work_date) for r in window} == {(BDE, date(2026, 3, 10)), (BDE, date(2026, 3, 11))}
    assert len(service.records_between(actor_for(container, ADMIN), date(2026, 3, 10), date(2026, 3, 10))) == 2

    with pytest.raises(ValidationError):
        service.records_between(manager, date(2026, 3, 11), date(2026, 3, 10))


def test_concurrent_logins_open_one_record(container):
    service = container.attendance_service
    barrier = threading.Barrier(8)

    def login(offset):
        barrier.wait()
        return service.record_login(BDE, now=NOW + timedelta(minutes=offset))

    with ThreadPoolExecutor(max_workers=8) as pool:
        records = list(pool.map(login, range(8)))

    assert len({r.attendance_id for r in records}) == 1
    assert len(container.attendance_repo.list_records(employee_ids=[BDE])) == 1


def test_concurrent_logouts_close_the_session_once(container):
    service = container.attendance_service
    service.record_login(BDE, now=NOW)
    barrier = threading.Barrier(6)

    def logout(offset):
        barrier.wait()
        return service.record_logout(BDE, now=NOW + timedelta(hours=8, minutes=offset))

    with ThreadPoolExecutor(max_workers=6) as pool:
        closed = [r for r in pool.map(logout, range(6)) if r is not None]

    assert len(closed) == 1

    (record,) = container.attendance_repo.list_records(employee_ids=[BDE])
    assert record.logout_time is not None
    assert NOW + timedelta(hours=8) <= record.logout_time <= NOW + timedelta(hours=8, minutes=5)
