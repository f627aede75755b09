from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from .datetime_utils import parse_iso_date
from ..core.enums import Role
from ..core.exceptions import DomainError, UnauthorizedError, ValidationError
from ..employees.model import Actor

# DomainError.code -> HTTP status
STATUS_BY_CODE = {
    "unauthorized": 401,
    "forbidden": 403,
    "not_owner": 403,
    "not_found": 404,
    "product_not_found": 404,
    "not_pending": 409,
    "not_rejected": 409,
    "already_resubmitted": 409,
    "invalid_target": 422,
    "orphan_supervisor": 422,
    "validation": 422,
}


def error_response(exc: DomainError):
    return jsonify({"error": exc.code, "message": str(exc)}), STATUS_BY_CODE.get(exc.code, 400)


def current_actor() -> Actor:
    """Actor stored in the session by the external authenticator."""
    if "user_id" not in session or "role" not in session:
        raise UnauthorizedError("Please sign in to continue")
    try:
        return Actor(employee_id=int(session["user_id"]), role=Role(session["role"]))
    except ValueError:
        raise UnauthorizedError("Session is not valid")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        return view(current_actor(), *args, **kwargs)

    return wrapper


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def optional_int_arg(name: str) -> Optional[int]:
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def date_arg(name: str):
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a date in YYYY-MM-DD format")


def required_int(data: dict, field: str) -> int:
    try:
        return int(data[field])
    except (KeyError, TypeError, ValueError):
        raise ValidationError(f"{field} is required")
