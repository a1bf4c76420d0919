from __future__ import annotations

from flask import Flask, jsonify

from ..auth.guards import Guards
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.gate)

    @app.route("/api/external/update-note", methods=["PATCH"], endpoint="external_update_note")
    @guards.api_key_required
    def external_update_note():
        body = json_body()
        entry, day = container.external_service.update_note(
            entry_id=body.get("entryId"),
            day=body.get("day"),
            text=body.get("text"),
            mode=body.get("mode"),
        )
        return jsonify(
            {
                "success": True,
                "entryId": entry.entry_id,
                "updatedDay": day,
                "notes": entry.notes.to_dict(),
            }
        )

    @app.route("/api/external/submit-timesheet", methods=["POST"], endpoint="external_submit_timesheet")
    @guards.api_key_required
    def external_submit_timesheet():
        body = json_body()
        entry = container.external_service.submit_timesheet(
            username=body.get("username"),
            schedule_id=body.get("scheduleId"),
            week_ending=body.get("weekEnding"),
            payload=body,
            notes=body.get("notes"),
        )
        return jsonify(
            {
                "success": True,
                "message": "Timesheet saved and submitted successfully",
                "entry": entry.to_public(with_schedule=False),
            }
        )
