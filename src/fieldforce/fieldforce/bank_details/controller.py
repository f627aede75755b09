from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import json_body, login_required
from ..container import Container
from ..employees.model import Actor


def register(app: Flask, container: Container) -> None:
    @app.route("/api/bank-details/<int:employee_id>", methods=["GET"], endpoint="bank_details_get")
    @login_required
    def bank_details_get(actor: Actor, employee_id: int):
        return jsonify(container.bank_details_service.get(actor, employee_id).to_dict())

    @app.route("/api/bank-details", methods=["POST"], endpoint="bank_details_save")
    @login_required
    def bank_details_save(actor: Actor):
        data = json_body()
        details, created = container.bank_details_service.save(
            actor,
            data.get("employee_id", actor.employee_id),
            bank_name=data.get("bank_name"),
            ifsc_code=data.get("ifsc_code"),
            account_number=data.get("account_number"),
        )
        return jsonify(details.to_dict()), 201 if created else 200
