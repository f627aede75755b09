from __future__ import annotations

import pytest

from src.fieldforce.fieldforce.core.enums import Role
from src.fieldforce.fieldforce.main import create_app

# Demo branch seeded by the memory backend.
ADMIN_ID, MANAGER_ID, BDM_ID, BDE_ID = 1, 2, 3, 4


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("AUTO_SEED_DB", "1")
    return create_app()


def login(client, employee_id: int, role: Role) -> None:
    with client.session_transaction() as s:
        s["user_id"] = employee_id
        s["role"] = role.value


def test_requests_without_session_are_unauthorized(app):
    resp = app.test_client().get("/api/employees")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthorized"


def test_sales_flow_over_http(app):
    bde = app.test_client()
    login(bde, BDE_ID, Role.BDE)
    products = bde.get("/api/products").get_json()
    soundbox = next(p for p in products if p["name"] == "Soundbox")

    created = bde.post(
        "/api/sales",
        json={
            "merchant_name": "Sai Traders",
            "merchant_mobile": "9876543210",
            "location": "Pune",
            "amount": 999,
            "transaction_id": "TXN-42",
            "payment_mode": "imps",
            "product_id": soundbox["product_id"],
        },
    )
    assert created.status_code == 201
    report_id = created.get_json()["report_id"]

    assert bde.post(f"/api/sales/{report_id}/approve").status_code == 401

    admin = app.test_client()
    login(admin, ADMIN_ID, Role.ADMIN)
    approved = admin.post(f"/api/sales/{report_id}/approve")
    assert approved.get_json()["status"] == "approved"

    again = admin.post(f"/api/sales/{report_id}/approve")
    assert again.status_code == 409
    assert again.get_json()["error"] == "not_pending"

    assert bde.get("/api/sales/points").get_json()["today"] == soundbox["points"]


def test_hierarchy_endpoints(app):
    admin = app.test_client()
    login(admin, ADMIN_ID, Role.ADMIN)

    resp = admin.post("/api/hierarchy/remove", json={"employee_id": BDM_ID})
    assert resp.status_code == 200
    assert resp.get_json()["manager_id"] is None

    orphan = admin.post("/api/hierarchy/assign-bdm", json={"employee_id": BDE_ID, "bdm_id": BDM_ID})
    assert orphan.status_code == 422
    assert orphan.get_json()["error"] == "orphan_supervisor"

    missing = admin.post("/api/hierarchy/assign-manager", json={"employee_id": BDM_ID})
    assert missing.status_code == 422

    manager = app.test_client()
    login(manager, MANAGER_ID, Role.MANAGER)
    tree = manager.get("/api/hierarchy").get_json()
    assert [node["manager"]["employee_id"] for node in tree["managers"]] == [MANAGER_ID]


def test_out_of_team_lookup_is_forbidden(app):
    admin = app.test_client()
    login(admin, ADMIN_ID, Role.ADMIN)
    created = admin.post(
        "/api/employees",
        json={"full_name": "Loner", "mobile": "9876500000", "role": Role.BDE.value},
    )
    assert created.status_code == 201
    loner_id = created.get_json()["employee_id"]

    manager = app.test_client()
    login(manager, MANAGER_ID, Role.MANAGER)
    assert manager.get(f"/api/employees/{loner_id}").status_code == 403
    assert manager.get("/api/employees/9999").status_code == 404


def test_attendance_endpoints(app):
    bde = app.test_client()
    login(bde, BDE_ID, Role.BDE)

    assert bde.post("/api/attendance/logout").status_code == 409
    first = bde.post("/api/attendance/login").get_json()
    second = bde.post("/api/attendance/login").get_json()
    assert first["record"]["attendance_id"] == second["record"]["attendance_id"]
    assert first["status"] == "Logged In"

    today = bde.get("/api/attendance/today").get_json()
    assert today["status"] == "logged_in"

    day = first["record"]["work_date"]
    export = bde.get(f"/api/attendance/records.csv?start={day}&end={day}")
    assert export.status_code == 200
    assert export.mimetype == "text/csv"
    assert b"Logged In" in export.data

    assert bde.get("/api/attendance/records?start=bad&end=bad").status_code == 422


def test_malformed_ids_answer_422_not_500(app):
    admin = app.test_client()
    login(admin, ADMIN_ID, Role.ADMIN)

    registered = admin.post(
        "/api/employees",
        json={"full_name": "New Hire", "mobile": "9876543210", "role": Role.BDM.value, "manager_id": "abc"},
    )
    assert registered.status_code == 422
    assert registered.get_json()["error"] == "validation"

    bde = app.test_client()
    login(bde, BDE_ID, Role.BDE)
    sale = bde.post(
        "/api/sales",
        json={
            "merchant_name": "Sai Traders",
            "merchant_mobile": "9876543210",
            "location": "Pune",
            "amount": "nan",
            "transaction_id": "TXN-1",
            "payment_mode": "upi",
            "product_id": "abc",
        },
    )
    assert sale.status_code == 422


def test_bank_details_over_http(app):
    bde = app.test_client()
    login(bde, BDE_ID, Role.BDE)
    assert bde.get(f"/api/bank-details/{BDE_ID}").status_code == 404

    account = {"bank_name": "State Bank", "ifsc_code": "SBIN0000123", "account_number": "123456789"}
    assert bde.post("/api/bank-details", json=account).status_code == 201
    assert bde.post("/api/bank-details", json={**account, "bank_name": "HDFC"}).status_code == 200
    assert bde.get(f"/api/bank-details/{BDE_ID}").get_json()["bank_name"] == "HDFC"

    manager = app.test_client()
    login(manager, MANAGER_ID, Role.MANAGER)
    denied = manager.get(f"/api/bank-details/{BDE_ID}")
    assert denied.status_code == 403
    assert manager.post("/api/bank-details", json={**account, "employee_id": BDE_ID}).status_code == 403


def test_report_range_location_and_resubmission_conflict(app):
    bde = app.test_client()
    login(bde, BDE_ID, Role.BDE)
    bde.post(
        "/api/visits",
        json={
            "store_name": "Shree Kirana",
            "owner_name": "Ramesh",
            "location": "Kothrud, Pune",
            "phone_number": "9876543210",
            "photo_url": "media/store.jpg",
            "products_interested": ["soundbox"],
        },
    )
    assert len(bde.get("/api/visits/by-location?location=kothrud").get_json()) == 1
    assert bde.get("/api/visits/by-location").status_code == 422
    assert bde.get("/api/sales/range?start=2026-03-10").status_code == 422
    assert bde.get("/api/sales/range?start=2026-03-10&end=2026-03-12").get_json() == []

    values = {
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
    report_id = bde.post("/api/verifications", json=values).get_json()["report_id"]
    admin = app.test_client()
    login(admin, ADMIN_ID, Role.ADMIN)
    admin.post(f"/api/verifications/{report_id}/reject", json={"reason": "Blurry"})

    assert bde.post(f"/api/verifications/{report_id}/resubmit", json=values).status_code == 201
    again = bde.post(f"/api/verifications/{report_id}/resubmit", json=values)
    assert again.status_code == 409
    assert again.get_json()["error"] == "already_resubmitted"
