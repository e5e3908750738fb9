from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..container import Container
from ..web import admin_required, current_role, current_user_id, login_required


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        session.clear()
        session["user_id"] = user.user_id
        session["name"] = user.full_name
        session["role"] = user.role.value
        return jsonify({"user_id": user.user_id, "full_name": user.full_name, "role": user.role.value})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return "", 204

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(container.user_service.get_profile(user_id=current_user_id()))

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @admin_required
    def admin_users():
        return jsonify({"users": list(container.user_service.list_admin_view())})

    @app.route("/api/admin/users", methods=["POST"], endpoint="admin_create_user")
    @admin_required
    def admin_create_user():
        data = request.get_json(silent=True) or {}
        user_id = container.user_service.create_employee(
            current_role=current_role(),
            full_name=data.get("full_name", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            total_days=data.get("total_days"),
        )
        return jsonify({"user_id": user_id}), 201

    @app.route("/api/admin/users/<int:user_id>/balance", methods=["PUT"], endpoint="admin_update_balance")
    @admin_required
    def admin_update_balance(user_id: int):
        data = request.get_json(silent=True) or {}
        balance = container.user_service.update_total_days(
            current_role=current_role(),
            user_id=user_id,
            total_days=data.get("total_days"),
        )
        return jsonify(
            {
                "user_id": balance.user_id,
                "total_days": balance.total_days,
                "used_days": balance.used_days,
                "remaining_days": balance.remaining_days,
            }
        )

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="admin_delete_user")
    @admin_required
    def admin_delete_user(user_id: int):
        container.user_service.delete_user(current_role=current_role(), user_id=user_id)
        return "", 204
