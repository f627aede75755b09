from __future__ import annotations

import csv
import io

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..common.web import date_arg, login_required
from ..container import Container
from ..core.exceptions import ValidationError
from ..employees.model import Actor


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/login", methods=["POST"], endpoint="attendance_login")
    @login_required
    def attendance_login(actor: Actor):
        record = service.record_login(actor.employee_id)
        return jsonify({"record": record.to_dict(), "status": service.status_of(record).label})

    @app.route("/api/attendance/logout", methods=["POST"], endpoint="attendance_logout")
    @login_required
    def attendance_logout(actor: Actor):
        record = service.record_logout(actor.employee_id)
        if record is None:
            return jsonify({"record": None, "message": "No active session"}), 409
        return jsonify({"record": record.to_dict(), "status": service.status_of(record).label})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today(actor: Actor):
        record = service.today_record(actor.employee_id)
        status = service.status_of(record)
        return jsonify({"record": record.to_dict() if record else None, "status": status.value, "status_label": status.label})

    @app.route("/api/attendance/overview", methods=["GET"], endpoint="attendance_overview")
    @login_required
    def attendance_overview(actor: Actor):
        return jsonify(service.daily_overview(actor, date_arg("date") or now_local().date()))

    @app.route("/api/attendance/history/<int:employee_id>", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history(actor: Actor, employee_id: int):
        return jsonify([r.to_dict() for r in service.history(actor, employee_id)])

    def _range():
        start, end = date_arg("start"), date_arg("end")
        if start is None or end is None:
            raise ValidationError("start and end are required")
        return start, end

    @app.route("/api/attendance/records", methods=["GET"], endpoint="attendance_records")
    @login_required
    def attendance_records(actor: Actor):
        start, end = _range()
        return jsonify([r.to_dict() for r in service.records_between(actor, start, end)])

    @app.route("/api/attendance/records.csv", methods=["GET"], endpoint="attendance_records_csv")
    @login_required
    def attendance_records_csv(actor: Actor):
        start, end = _range()
        out = io.StringIO()
        writer = csv.DictWriter(
            out,
            fieldnames=["work_date", "employee_id", "login_time", "logout_time", "status"],
        )
        writer.writeheader()
        for record in service.records_between(actor, start, end):
            status = service.status_of(record).label
            writer.writerow(
                {
                    "work_date": record.work_date.isoformat(),
                    "employee_id": record.employee_id,
                    "login_time": record.login_time.isoformat(sep=" "),
                    "logout_time": record.logout_time.isoformat(sep=" ") if record.logout_time else "",
                    "status": status,
                }
            )

        filename = f"attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
