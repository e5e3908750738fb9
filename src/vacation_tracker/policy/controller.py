from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError
from ..web import admin_required, current_role, login_required


def _policy_json(policy) -> dict:
    return {
        "exclude_weekends": policy.exclude_weekends,
        "default_vacation_days": policy.default_vacation_days,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", methods=["GET"], endpoint="settings")
    @login_required
    def settings():
        return jsonify(_policy_json(container.policy_store.get()))

    @app.route("/api/admin/settings", methods=["PUT"], endpoint="admin_update_settings")
    @admin_required
    def admin_update_settings():
        data = request.get_json(silent=True) or {}
        if "exclude_weekends" not in data and "default_vacation_days" not in data:
            raise ValidationError("Nothing to update")

        policy = container.policy_store.get()
        if "exclude_weekends" in data:
            if not isinstance(data["exclude_weekends"], bool):
                raise ValidationError("exclude_weekends must be true or false")
            policy = container.policy_store.set(current_role=current_role(), exclude_weekends=data["exclude_weekends"])
        if "default_vacation_days" in data:
            policy = container.policy_store.set_default_vacation_days(
                current_role=current_role(), days=data["default_vacation_days"]
            )
        return jsonify(_policy_json(policy))
