from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import admin_required, current_user, login_required
from ..common.datetime_utils import parse_iso_date
from ..common.http import json_body
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/pto/request", methods=["POST"], endpoint="pto_create")
    @login_required
    def create_request():
        data = json_body()
        try:
            request_date = parse_iso_date(str(data.get("date") or ""))
        except ValueError:
            raise ValidationError("Date is required (YYYY-MM-DD)")

        req = container.pto_service.create_request(
            user_id=current_user().user_id,
            request_date=request_date,
            hours=data.get("hours"),
            reason=data.get("reason", ""),
        )
        return jsonify(req.to_json()), 201

    @app.route("/api/pto/user", methods=["GET"], endpoint="pto_user_requests")
    @login_required
    def user_requests():
        rows = container.pto_service.list_user_requests(current_user().user_id, search=request.args.get("search"))
        return jsonify([r.to_json() for r in rows])

    @app.route("/api/pto/all", methods=["GET"], endpoint="pto_all_requests")
    @admin_required
    def all_requests():
        rows = container.pto_service.list_all_requests(
            current_role=current_user().role,
            search=request.args.get("search"),
            status=request.args.get("status"),
        )
        return jsonify([r.to_json() for r in rows])

    @app.route("/api/pto/request/<int:request_id>", methods=["PATCH"], endpoint="pto_update_status")
    @admin_required
    def update_status(request_id: int):
        admin = current_user()
        req = container.pto_service.update_status(
            current_role=admin.role,
            request_id=request_id,
            approver_id=admin.user_id,
            status=json_body().get("status"),
        )
        return jsonify(req.to_json())

    @app.route("/api/pto/user/month/<year>/<month>", methods=["GET"], endpoint="pto_monthly_count")
    @login_required
    def monthly_count(year: str, month: str):
        return jsonify(container.pto_service.monthly_count(current_user().user_id, year, month))

    @app.route("/api/pto/user/year/<year>", methods=["GET"], endpoint="pto_yearly_hours")
    @login_required
    def yearly_hours(year: str):
        return jsonify(container.pto_service.yearly_hours(current_user().user_id, year))
