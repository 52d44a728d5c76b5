import logging

from flask import Blueprint, jsonify, session

from routes.utils import client_ip, request_data, session_gate

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/admin")


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request_data()
    admin = session_gate().login(
        session,
        username=data.get("username"),
        password=data.get("password"),
        ip=client_ip(),
    )
    return jsonify({"success": True, "message": "Login successful", "username": admin.username})


@auth_bp.route("/logout", methods=["POST"])
def logout():
    session_gate().logout(session)
    return jsonify({"success": True, "message": "Logged out successfully"})


@auth_bp.route("/auth-status")
def auth_status():
    authenticated, username = session_gate().check(session)
    if authenticated:
        return jsonify({"success": True, "authenticated": True, "username": username})
    return jsonify({"success": True, "authenticated": False})
