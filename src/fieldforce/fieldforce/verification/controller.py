from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import date_arg, json_body, login_required
from ..container import Container
from ..core.enums import ReportStatus
from ..core.exceptions import ValidationError
from ..employees.model import Actor


def register(app: Flask, container: Container) -> None:
    @app.route("/api/verifications", methods=["GET"], endpoint="verifications_list")
    @login_required
    def verifications_list(actor: Actor):
        service = container.verification_service
        status = request.args.get("status")
        query = request.args.get("q")
        if status:
            try:
                reports = service.list_by_status(actor, ReportStatus(status))
            except ValueError:
                raise ValidationError("Unknown report status")
        elif query:
            reports = service.search(actor, query)
        else:
            reports = service.list_for(actor)
        return jsonify([r.to_dict() for r in reports])

    @app.route("/api/verifications", methods=["POST"], endpoint="verifications_create")
    @login_required
    def verifications_create(actor: Actor):
        report = container.verification_service.create(actor, values=json_body())
        return jsonify(report.to_dict()), 201

    @app.route("/api/verifications/pending", methods=["GET"], endpoint="verifications_pending")
    @login_required
    def verifications_pending(actor: Actor):
        return jsonify([r.to_dict() for r in container.verification_service.list_pending(actor)])

    @app.route("/api/verifications/range", methods=["GET"], endpoint="verifications_range")
    @login_required
    def verifications_range(actor: Actor):
        reports = container.verification_service.list_between(actor, start=date_arg("start"), end=date_arg("end"))
        return jsonify([r.to_dict() for r in reports])

    @app.route("/api/verifications/<int:report_id>", methods=["GET"], endpoint="verifications_get")
    @login_required
    def verifications_get(actor: Actor, report_id: int):
        return jsonify(container.verification_service.get(actor, report_id).to_dict())

    @app.route("/api/verifications/<int:report_id>/approve", methods=["POST"], endpoint="verifications_approve")
    @login_required
    def verifications_approve(actor: Actor, report_id: int):
        return jsonify(container.verification_service.approve(actor, report_id).to_dict())

    @app.route("/api/verifications/<int:report_id>/reject", methods=["POST"], endpoint="verifications_reject")
    @login_required
    def verifications_reject(actor: Actor, report_id: int):
        report = container.verification_service.reject(actor, report_id, reason=json_body().get("reason"))
        return jsonify(report.to_dict())

    @app.route("/api/verifications/<int:report_id>/resubmit", methods=["POST"], endpoint="verifications_resubmit")
    @login_required
    def verifications_resubmit(actor: Actor, report_id: int):
        report = container.verification_service.resubmit(actor, report_id, values=json_body())
        return jsonify(report.to_dict()), 201
