from __future__ import annotations

from flask import Flask, jsonify

from ..auth.guards import Guards, current_identity
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.gate)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        result = container.auth_service.login(body.get("username"), body.get("password"))
        return jsonify({"token": result.token, "user": result.identity.to_public()})

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    @guards.admin_required
    def register_user():
        body = json_body()
        user = container.user_service.register(
            current_identity(),
            username=body.get("username"),
            password=body.get("password"),
            role=body.get("role"),
        )
        return jsonify({"id": user.user_id, "username": user.username, "role": user.role.value}), 201

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @guards.admin_required
    def list_users():
        users = container.user_service.list_users(current_identity())
        return jsonify([u.to_public() for u in users])
