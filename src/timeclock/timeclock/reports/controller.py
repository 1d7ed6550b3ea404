from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.auth import admin_required, current_user
from ..common.datetime_utils import parse_date_range
from ..container import Container
from ..core.constants import XLSX_MIMETYPE
from .model import ExportFile
from .service import build_time_log_query


def _send_export(export: ExportFile):
    return send_file(
        io.BytesIO(export.content),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=export.filename,
    )


def _time_log_query():
    start_date, end_date = parse_date_range(request.args.get("startDate"), request.args.get("endDate"))
    return build_time_log_query(
        search=request.args.get("search", ""),
        status=request.args.get("status", "all"),
        month=request.args.get("month"),
        year=request.args.get("year"),
        start_date=start_date,
        end_date=end_date,
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/users/<int:user_id>/time-entries", methods=["GET"], endpoint="admin_user_time_entries")
    @admin_required
    def user_time_entries(user_id: int):
        start_date, end_date = parse_date_range(request.args.get("startDate"), request.args.get("endDate"))
        entries = container.report_service.user_time_entries(
            current_role=current_user().role,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
        )
        return jsonify([e.to_json() for e in entries])

    @app.route("/api/admin/reports/time", methods=["GET"], endpoint="admin_time_report")
    @admin_required
    def time_report():
        start_date, end_date = parse_date_range(request.args.get("startDate"), request.args.get("endDate"))
        report = container.report_service.time_report(
            current_role=current_user().role,
            start_date=start_date,
            end_date=end_date,
        )
        return jsonify([r.to_json() for r in report])

    @app.route("/api/admin/time/logs", methods=["GET"], endpoint="admin_time_logs")
    @admin_required
    def time_logs():
        result = container.report_service.list_time_logs(
            current_role=current_user().role,
            query=_time_log_query(),
            page=request.args.get("page", 1),
            limit=request.args.get("limit", 10),
        )
        return jsonify(result.to_json())

    @app.route("/api/admin/time/logs/export", methods=["GET"], endpoint="admin_time_logs_export")
    @admin_required
    def export_time_logs():
        export = container.report_service.export_time_logs(
            current_role=current_user().role,
            query=_time_log_query(),
            tz_offset=request.args.get("tzOffset"),
        )
        return _send_export(export)

    @app.route("/api/admin/time/entries/<int:entry_id>", methods=["DELETE"], endpoint="admin_delete_time_entry")
    @admin_required
    def delete_time_entry(entry_id: int):
        result = container.time_entry_service.delete_entry_as_admin(
            current_role=current_user().role,
            entry_id=entry_id,
        )
        return jsonify(result.to_json())

    @app.route("/api/admin/table/export", methods=["GET"], endpoint="admin_table_export")
    @admin_required
    def export_table():
        export = container.report_service.export_pto_requests(
            current_role=current_user().role,
            search=request.args.get("search"),
            status=request.args.get("status"),
        )
        return _send_export(export)
