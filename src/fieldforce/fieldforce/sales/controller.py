from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import date_arg, json_body, login_required, optional_int_arg
from ..container import Container
from ..core.enums import ReportStatus
from ..core.exceptions import ValidationError
from ..employees.model import Actor


def _status_arg():
    raw = request.args.get("status")
    if not raw:
        return None
    try:
        return ReportStatus(raw)
    except ValueError:
        raise ValidationError("Unknown report status")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sales", methods=["GET"], endpoint="sales_list")
    @login_required
    def sales_list(actor: Actor):
        reports = container.sales_service.list_for(actor, status=_status_arg())
        return jsonify([r.to_dict() for r in reports])

    @app.route("/api/sales", methods=["POST"], endpoint="sales_create")
    @login_required
    def sales_create(actor: Actor):
        data = json_body()
        report = container.sales_service.create(
            actor,
            merchant_name=data.get("merchant_name"),
            merchant_mobile=data.get("merchant_mobile"),
            location=data.get("location"),
            amount=data.get("amount"),
            transaction_id=data.get("transaction_id"),
            payment_mode=data.get("payment_mode"),
            product_id=data.get("product_id"),
        )
        return jsonify(report.to_dict()), 201

    @app.route("/api/sales/pending", methods=["GET"], endpoint="sales_pending")
    @login_required
    def sales_pending(actor: Actor):
        return jsonify([r.to_dict() for r in container.sales_service.list_pending(actor)])

    @app.route("/api/sales/points", methods=["GET"], endpoint="sales_points")
    @login_required
    def sales_points(actor: Actor):
        return jsonify(container.sales_service.points_summary(actor))

    @app.route("/api/sales/monthly", methods=["GET"], endpoint="sales_monthly")
    @login_required
    def sales_monthly(actor: Actor):
        today = now_local()
        reports = container.sales_service.sales_by_month(
            actor,
            year=optional_int_arg("year") or today.year,
            month=optional_int_arg("month") or today.month,
            bde_id=optional_int_arg("bde_id"),
        )
        return jsonify([r.to_dict() for r in reports])

    @app.route("/api/sales/by-location", methods=["GET"], endpoint="sales_by_location")
    @login_required
    def sales_by_location(actor: Actor):
        reports = container.sales_service.search_by_location(actor, request.args.get("location"))
        return jsonify([r.to_dict() for r in reports])

    @app.route("/api/sales/range", methods=["GET"], endpoint="sales_range")
    @login_required
    def sales_range(actor: Actor):
        reports = container.sales_service.list_between(actor, start=date_arg("start"), end=date_arg("end"))
        return jsonify([r.to_dict() for r in reports])

    @app.route("/api/sales/<int:report_id>", methods=["GET"], endpoint="sales_get")
    @login_required
    def sales_get(actor: Actor, report_id: int):
        return jsonify(container.sales_service.get(actor, report_id).to_dict())

    @app.route("/api/sales/<int:report_id>/approve", methods=["POST"], endpoint="sales_approve")
    @login_required
    def sales_approve(actor: Actor, report_id: int):
        return jsonify(container.sales_service.approve(actor, report_id).to_dict())

    @app.route("/api/sales/<int:report_id>/reject", methods=["POST"], endpoint="sales_reject")
    @login_required
    def sales_reject(actor: Actor, report_id: int):
        report = container.sales_service.reject(actor, report_id, reason=json_body().get("reason"))
        return jsonify(report.to_dict())
