from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import Guards, current_identity
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.gate)
    service = container.timesheet_service

    @app.route("/api/timeentries", methods=["GET"], endpoint="list_entries")
    @guards.login_required
    def list_entries():
        entries = service.list_entries(
            current_identity(),
            schedule_id=request.args.get("scheduleId"),
            week_ending=request.args.get("weekEnding"),
        )
        return jsonify([e.to_public() for e in entries])

    @app.route("/api/timeentries", methods=["POST"], endpoint="save_entry")
    @guards.login_required
    def save_entry():
        body = json_body()
        entry = service.save_entry(
            current_identity(),
            schedule_id=body.get("scheduleId"),
            week_ending=body.get("weekEnding"),
            payload=body,
            notes=body.get("notes"),
        )
        return jsonify(entry.to_public(with_schedule=False))

    @app.route("/api/timeentries/<int:entry_id>/submit", methods=["PATCH"], endpoint="submit_entry")
    @guards.login_required
    def submit_entry(entry_id: int):
        entry = service.submit_entry(current_identity(), entry_id=entry_id)
        return jsonify(entry.to_public(with_schedule=False))

    @app.route("/api/timeentries/<int:entry_id>/notes", methods=["PATCH"], endpoint="update_notes")
    @guards.login_required
    def update_notes(entry_id: int):
        body = json_body()
        entry = service.update_notes(current_identity(), entry_id=entry_id, notes=body.get("notes"))
        return jsonify(entry.to_public(with_schedule=False))

    @app.route("/api/timeentries/<int:entry_id>/hours", methods=["PATCH"], endpoint="update_hours")
    @guards.login_required
    def update_hours(entry_id: int):
        entry = service.update_hours(current_identity(), entry_id=entry_id, payload=json_body())
        return jsonify(entry.to_public(with_schedule=False))

    @app.route("/api/timeentries/<int:entry_id>/notes/day", methods=["PATCH"], endpoint="update_day_note")
    @guards.login_required
    def update_day_note(entry_id: int):
        body = json_body()
        entry = service.update_day_note(
            current_identity(),
            entry_id=entry_id,
            day=body.get("day"),
            text=body.get("text"),
            mode=body.get("mode"),
        )
        return jsonify(entry.to_public(with_schedule=False))
