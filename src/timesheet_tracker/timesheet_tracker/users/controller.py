from __future__ import annotations

from flask import Blueprint, Flask, g, jsonify

from ..common.http import json_body, json_errors, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("users", __name__, url_prefix="/api/user")
    login_required = token_required(container.access_guard)

    @bp.route("/register", methods=["POST"], endpoint="register")
    @json_errors
    def register_user():
        data = json_body()
        session = container.auth_service.register(
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
        )
        return jsonify(session.to_dict()), 201

    @bp.route("/login", methods=["POST"], endpoint="login")
    @json_errors
    def login():
        data = json_body()
        session = container.auth_service.authenticate(email=data.get("email"), password=data.get("password"))
        return jsonify(session.to_dict()), 200

    @bp.route("/logout", methods=["POST"], endpoint="logout")
    @json_errors
    @login_required
    def logout():
        container.auth_service.logout(g.token)
        return jsonify({"message": "Logged out successfully"}), 200

    @bp.route("/get", methods=["GET"], endpoint="get_self")
    @json_errors
    @login_required
    def get_self():
        user = container.user_service.get_self(g.current_user.user_id)
        return jsonify({"id": user.user_id, "name": user.name, "email": user.email}), 200

    app.register_blueprint(bp)
