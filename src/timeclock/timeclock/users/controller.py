from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.auth import admin_required, current_user, login_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        result = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = True
        session["user_id"] = result.user.user_id
        session["role"] = result.user.role.value
        return jsonify({"user": result.user.to_public(), "token": result.token})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out successfully"})

    @app.route("/api/auth/profile", methods=["GET"], endpoint="auth_profile")
    @login_required
    def profile():
        return jsonify(container.auth_service.get_profile(current_user().user_id).to_public())

    @app.route("/api/auth/profile", methods=["PUT"], endpoint="auth_update_profile")
    @login_required
    def update_profile():
        data = json_body()
        user = container.auth_service.update_profile(
            current_user().user_id,
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
        )
        return jsonify(user.to_public())

    @app.route("/api/auth/password", methods=["PUT"], endpoint="auth_update_password")
    @login_required
    def update_password():
        data = json_body()
        container.auth_service.update_password(
            current_user().user_id,
            current_password=data.get("current_password", ""),
            new_password=data.get("new_password", ""),
        )
        return jsonify({"success": True, "message": "Password updated successfully"})

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @admin_required
    def create_user():
        data = json_body()
        user = container.user_service.create_user(
            current_role=current_user().role,
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=data.get("role", "user"),
            position=data.get("position", ""),
        )
        return jsonify(user.to_public()), 201

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def list_users():
        users = container.user_service.list_users(current_role=current_user().role)
        return jsonify([u.to_public() for u in users])

    @app.route("/api/admin/users/<int:user_id>/role", methods=["PATCH"], endpoint="admin_update_role")
    @admin_required
    def update_role(user_id: int):
        user = container.user_service.update_role(
            current_role=current_user().role,
            user_id=user_id,
            role=json_body().get("role"),
        )
        return jsonify(user.to_public())
