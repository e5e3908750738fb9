from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError
from ..web import admin_required, current_user_id, login_required


def _optional_int(value, field_name: str):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def _optional_status(value):
    if not value:
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError("Unknown status")


def register(app: Flask, container: Container) -> None:
    service = container.vacation_service

    @app.route("/api/vacations", methods=["GET"], endpoint="my_vacations")
    @login_required
    def my_vacations():
        requests_ = service.list_my_requests(
            user_id=current_user_id(),
            status=_optional_status(request.args.get("status")),
            year=_optional_int(request.args.get("year"), "year"),
        )
        return jsonify({"requests": [r.to_dict() for r in requests_]})

    @app.route("/api/vacations", methods=["POST"], endpoint="create_vacation")
    @login_required
    def create_vacation():
        data = request.get_json(silent=True) or {}
        created = service.create_request(
            user_id=current_user_id(),
            start_date=parse_iso_date(data.get("start_date"), "start date"),
            end_date=parse_iso_date(data.get("end_date"), "end date"),
            reason=data.get("reason"),
        )
        return jsonify(created.to_dict()), 201

    @app.route("/api/vacations/team", methods=["GET"], endpoint="team_vacations")
    @login_required
    def team_vacations():
        month = _optional_int(request.args.get("month"), "month")
        year = _optional_int(request.args.get("year"), "year")
        if month is None or year is None:
            raise ValidationError("month and year are required")
        return jsonify({"vacations": list(service.list_team(month=month, year=year))})

    @app.route("/api/vacations/<int:request_id>", methods=["GET"], endpoint="get_vacation")
    @login_required
    def get_vacation(request_id: int):
        return jsonify(service.get_request(request_id=request_id, caller_id=current_user_id()).to_dict())

    @app.route("/api/vacations/<int:request_id>", methods=["DELETE"], endpoint="cancel_vacation")
    @login_required
    def cancel_vacation(request_id: int):
        service.cancel_request(request_id=request_id, user_id=current_user_id())
        return "", 204

    @app.route("/api/admin/vacations/pending", methods=["GET"], endpoint="admin_pending_vacations")
    @admin_required
    def admin_pending_vacations():
        return jsonify({"requests": list(service.list_pending())})

    @app.route(
        "/api/admin/vacations/<int:request_id>/<any(approve, reject):decision>",
        methods=["POST"],
        endpoint="admin_review_vacation",
    )
    @admin_required
    def admin_review_vacation(request_id: int, decision: str):
        data = request.get_json(silent=True) or {}
        reviewed = service.review_request(
            request_id=request_id,
            reviewer_id=current_user_id(),
            decision=decision,
            reason=data.get("reason"),
        )
        return jsonify(reviewed.to_dict())

    @app.route("/api/admin/vacations/<int:request_id>", methods=["DELETE"], endpoint="admin_cancel_vacation")
    @admin_required
    def admin_cancel_vacation(request_id: int):
        removed = service.admin_cancel(request_id=request_id, admin_id=current_user_id())
        return jsonify(removed.to_dict())

    @app.route("/api/admin/balances/reset", methods=["POST"], endpoint="admin_reset_balances")
    @admin_required
    def admin_reset_balances():
        data = request.get_json(silent=True) or {}
        affected = service.reset_balances(
            admin_id=current_user_id(),
            new_total=data.get("new_total"),
            clear_history=bool(data.get("clear_history", False)),
            confirmed=bool(data.get("confirm", False)),
        )
        return jsonify({"employees_affected": affected})
