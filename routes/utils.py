from functools import wraps

from flask import current_app, jsonify, request, session

from services.admin_service import AdminSessionGate, InquiryManagementService
from services.inquiry_service import InquiryIntakeService
from services.inquiry_store import InquiryStore
from services.team_directory import TeamDirectory


# ── Request helpers ──
def request_data():
    """JSON body if present, else form data."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form


def client_ip() -> str:
    # ProxyFix has already applied X-Forwarded-For
    return request.remote_addr or "unknown"


# ── Service wiring ──
def notification_sender():
    return current_app.extensions["notification_sender"]


def intake_service():
    config = current_app.config
    return InquiryIntakeService(
        store=InquiryStore(),
        sender=notification_sender(),
        directory=TeamDirectory.from_config(config),
        company_name=config["COMPANY_NAME"],
        company_email=config["COMPANY_EMAIL"],
        follow_up_hours=config["FOLLOW_UP_HOURS"],
    )


def management_service():
    config = current_app.config
    return InquiryManagementService(
        store=InquiryStore(),
        sender=notification_sender(),
        company_name=config["COMPANY_NAME"],
        company_email=config["COMPANY_EMAIL"],
    )


def session_gate():
    config = current_app.config
    return AdminSessionGate(
        store=InquiryStore(),
        max_attempts=int(config.get("LOGIN_MAX_ATTEMPTS", 5)),
        block_seconds=int(config.get("LOGIN_BLOCK_SECONDS", 300)),
    )


# ── Auth decorator ──
def require_admin(f):
    """Admin session guard. Unauthenticated calls get a JSON 401, never a redirect."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        authenticated, _ = session_gate().check(session)
        if not authenticated:
            return jsonify({"success": False, "message": "Authentication required"}), 401
        return f(*args, **kwargs)

    return decorated_function
