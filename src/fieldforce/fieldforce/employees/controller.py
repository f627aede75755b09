from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import optional_positive_int
from ..common.web import json_body, login_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import UnauthorizedError, ValidationError
from ..employees.model import Actor


def _role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Unknown role")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me(actor: Actor):
        return jsonify(container.employee_service.get(actor, actor.employee_id).to_dict())

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @login_required
    def employees_list(actor: Actor):
        role = request.args.get("role")
        query = request.args.get("q")
        if role:
            employees = container.employee_service.list_by_role(actor, _role(role))
        elif query:
            employees = container.employee_service.search(actor, query)
        else:
            employees = container.employee_service.list_for(actor)
        return jsonify([e.to_dict() for e in employees])

    @app.route("/api/employees", methods=["POST"], endpoint="employees_register")
    @login_required
    def employees_register(actor: Actor):
        if not actor.is_admin:
            raise UnauthorizedError("Only admins can register employees")
        data = json_body()
        employee = container.employee_service.register(
            full_name=data.get("full_name"),
            mobile=data.get("mobile"),
            role=_role(data.get("role")),
            job_location=data.get("job_location") or "",
            manager_id=optional_positive_int(data.get("manager_id"), "manager_id"),
            bdm_id=optional_positive_int(data.get("bdm_id"), "bdm_id"),
        )
        return jsonify(employee.to_dict()), 201

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @login_required
    def employees_get(actor: Actor, employee_id: int):
        return jsonify(container.employee_service.get(actor, employee_id).to_dict())

    @app.route("/api/employees/<int:employee_id>", methods=["PATCH"], endpoint="employees_update")
    @login_required
    def employees_update(actor: Actor, employee_id: int):
        data = json_body()
        employee = container.employee_service.update_profile(
            actor,
            employee_id,
            full_name=data.get("full_name"),
            mobile=data.get("mobile"),
            job_location=data.get("job_location"),
        )
        return jsonify(employee.to_dict())

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @login_required
    def employees_delete(actor: Actor, employee_id: int):
        container.employee_service.delete(actor, employee_id)
        return "", 204
