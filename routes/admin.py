import logging

from flask import Blueprint, current_app, jsonify, request

from routes.utils import management_service, request_data, require_admin

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

CLEAR_CONFIRM_TEXT = "DELETE ALL"


@admin_bp.after_request
def no_store(response):
    response.headers["Cache-Control"] = "no-store"
    return response


@admin_bp.route("/inquiries")
@require_admin
def list_inquiries():
    limit = request.args.get("limit", 50, type=int)
    inquiries = management_service().list(limit)
    return jsonify({
        "success": True,
        "inquiries": [inquiry.to_dict() for inquiry in inquiries],
        "total": len(inquiries),
    })


@admin_bp.route("/inquiries/<int:inquiry_id>")
@require_admin
def inquiry_detail(inquiry_id):
    """Inquiry with its interaction history."""
    service = management_service()
    inquiry = service.get(inquiry_id)
    history = service.history(inquiry.id)
    return jsonify({"success": True, "inquiry": inquiry.to_dict(interactions=history)})


@admin_bp.route("/stats")
@require_admin
def stats():
    return jsonify({"success": True, "stats": management_service().stats()})


@admin_bp.route("/inquiries/<int:inquiry_id>/status", methods=["PUT"])
@require_admin
def update_status(inquiry_id):
    status = str(request_data().get("status", "")).strip()
    management_service().set_status(inquiry_id, status)
    return jsonify({"success": True, "message": f"Inquiry #{inquiry_id} marked as {status}"})


@admin_bp.route("/send-email", methods=["POST"])
@require_admin
def send_email():
    data = request_data()
    management_service().reply(
        to=data.get("to"),
        subject=data.get("subject"),
        message=data.get("message"),
        inquiry_id=data.get("inquiryId"),
        reply_to=data.get("replyTo"),
    )
    return jsonify({"success": True, "message": "Email sent successfully!"})


@admin_bp.route("/clear-data", methods=["POST"])
@require_admin
def clear_data():
    if not current_app.config.get("ALLOW_DATA_RESET"):
        logger.warning("CLEAR DATA refused: ALLOW_DATA_RESET is disabled")
        return jsonify({"success": False, "message": "Data reset is disabled in this environment."}), 403

    confirm = str(request_data().get("confirm", ""))
    if confirm != CLEAR_CONFIRM_TEXT:
        return jsonify({
            "success": False,
            "message": f'Confirmation text does not match. Send "{CLEAR_CONFIRM_TEXT}" to proceed.',
        }), 400

    deleted = management_service().clear_all()
    return jsonify({"success": True, "message": "Database cleaned successfully", "deleted": deleted})
