from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import current_user, login_required
from ..common.datetime_utils import parse_date_range
from ..container import Container
from .model import EntryPage


def register(app: Flask, container: Container) -> None:
    @app.route("/api/time/clock-in", methods=["POST"], endpoint="time_clock_in")
    @login_required
    def clock_in():
        entry = container.time_entry_service.clock_in(current_user().user_id)
        return jsonify(entry.to_json()), 201

    @app.route("/api/time/clock-out", methods=["POST"], endpoint="time_clock_out")
    @login_required
    def clock_out():
        entry = container.time_entry_service.clock_out(current_user().user_id)
        return jsonify(entry.to_json())

    @app.route("/api/time/entries", methods=["GET"], endpoint="time_entries")
    @login_required
    def entries():
        start_date, end_date = parse_date_range(request.args.get("startDate"), request.args.get("endDate"))
        result = container.time_entry_service.list_entries(
            current_user().user_id,
            start_date=start_date,
            end_date=end_date,
            page=request.args.get("page"),
            limit=request.args.get("limit"),
        )
        if isinstance(result, EntryPage):
            return jsonify(result.to_json())
        return jsonify([e.to_json() for e in result])

    @app.route("/api/time/status", methods=["GET"], endpoint="time_status")
    @login_required
    def status():
        return jsonify(container.time_entry_service.get_status(current_user().user_id).to_json())

    @app.route("/api/time/stats", methods=["GET"], endpoint="time_stats")
    @login_required
    def stats():
        return jsonify(container.time_entry_service.get_stats(current_user().user_id).to_json())

    @app.route("/api/time/entries/<int:entry_id>", methods=["DELETE"], endpoint="time_delete_entry")
    @login_required
    def delete_entry(entry_id: int):
        result = container.time_entry_service.delete_entry(current_user().user_id, entry_id)
        return jsonify(result.to_json())
