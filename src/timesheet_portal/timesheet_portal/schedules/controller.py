from __future__ import annotations

from flask import Flask, jsonify

from ..auth.guards import Guards, current_identity
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.gate)

    @app.route("/api/schedules", methods=["GET"], endpoint="list_schedules")
    @guards.login_required
    def list_schedules():
        schedules = container.schedule_service.list_visible(current_identity())
        return jsonify([s.to_public() for s in schedules])

    @app.route("/api/schedules", methods=["POST"], endpoint="create_schedule")
    @guards.admin_required
    def create_schedule():
        body = json_body()
        schedule = container.schedule_service.create(
            current_identity(),
            user_id=body.get("userId"),
            project_title=body.get("projectTitle"),
        )
        return jsonify(schedule.to_public()), 201

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="delete_schedule")
    @guards.admin_required
    def delete_schedule(schedule_id: int):
        container.schedule_service.delete(current_identity(), schedule_id=schedule_id)
        return jsonify({"success": True})

    @app.route("/api/users/<int:user_id>/schedules", methods=["GET"], endpoint="user_schedules")
    @guards.login_required
    def user_schedules(user_id: int):
        user, schedules = container.schedule_service.list_for_user(current_identity(), target_user_id=user_id)
        return jsonify(
            {
                "user": {"id": user.user_id, "username": user.username},
                "schedules": [s.to_named() for s in schedules],
            }
        )
