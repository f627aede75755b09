from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import date_arg, json_body, login_required
from ..container import Container
from ..employees.model import Actor


def register(app: Flask, container: Container) -> None:
    @app.route("/api/visits", methods=["GET"], endpoint="visits_list")
    @login_required
    def visits_list(actor: Actor):
        return jsonify([r.to_dict() for r in container.visit_service.list_for(actor)])

    @app.route("/api/visits", methods=["POST"], endpoint="visits_create")
    @login_required
    def visits_create(actor: Actor):
        data = json_body()
        report = container.visit_service.create(
            actor,
            store_name=data.get("store_name"),
            owner_name=data.get("owner_name"),
            location=data.get("location"),
            phone_number=data.get("phone_number"),
            photo_url=data.get("photo_url"),
            products_interested=data.get("products_interested") or [],
        )
        return jsonify(report.to_dict()), 201

    @app.route("/api/visits/today", methods=["GET"], endpoint="visits_today")
    @login_required
    def visits_today(actor: Actor):
        return jsonify({"count": container.visit_service.today_count(actor)})

    @app.route("/api/visits/by-location", methods=["GET"], endpoint="visits_by_location")
    @login_required
    def visits_by_location(actor: Actor):
        reports = container.visit_service.search_by_location(actor, request.args.get("location"))
        return jsonify([r.to_dict() for r in reports])

    @app.route("/api/visits/range", methods=["GET"], endpoint="visits_range")
    @login_required
    def visits_range(actor: Actor):
        reports = container.visit_service.list_between(actor, start=date_arg("start"), end=date_arg("end"))
        return jsonify([r.to_dict() for r in reports])
