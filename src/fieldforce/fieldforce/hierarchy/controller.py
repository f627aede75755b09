from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import json_body, login_required, required_int
from ..container import Container
from ..employees.model import Actor


def register(app: Flask, container: Container) -> None:
    @app.route("/api/hierarchy", methods=["GET"], endpoint="hierarchy_view")
    @login_required
    def hierarchy_view(actor: Actor):
        return jsonify(container.visibility.build_hierarchy(actor))

    @app.route("/api/hierarchy/assign-manager", methods=["POST"], endpoint="hierarchy_assign_manager")
    @login_required
    def hierarchy_assign_manager(actor: Actor):
        data = json_body()
        employee = container.assignments.assign_to_manager(
            actor,
            employee_id=required_int(data, "employee_id"),
            manager_id=required_int(data, "manager_id"),
        )
        return jsonify(employee.to_dict())

    @app.route("/api/hierarchy/assign-bdm", methods=["POST"], endpoint="hierarchy_assign_bdm")
    @login_required
    def hierarchy_assign_bdm(actor: Actor):
        data = json_body()
        employee = container.assignments.assign_to_bdm(
            actor,
            employee_id=required_int(data, "employee_id"),
            bdm_id=required_int(data, "bdm_id"),
        )
        return jsonify(employee.to_dict())

    @app.route("/api/hierarchy/remove", methods=["POST"], endpoint="hierarchy_remove")
    @login_required
    def hierarchy_remove(actor: Actor):
        employee = container.assignments.remove_assignment(actor, employee_id=required_int(json_body(), "employee_id"))
        return jsonify(employee.to_dict())
