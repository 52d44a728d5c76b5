import logging

from flask import Blueprint, current_app, jsonify, request
from flask_wtf.csrf import generate_csrf

from extensions import limiter
from routes.utils import client_ip, intake_service, request_data
from services.inquiry_service import Submission

logger = logging.getLogger(__name__)

contact_bp = Blueprint("contact", __name__, url_prefix="/api")

RATE_LIMIT_MESSAGE = "Too many contact form submissions, please try again later."


@contact_bp.route("/contact", methods=["POST"])
@limiter.limit(lambda: current_app.config["CONTACT_RATE_LIMIT"], error_message=RATE_LIMIT_MESSAGE)
def submit_contact():
    submission = Submission.from_form(
        request_data(),
        ip_address=client_ip(),
        user_agent=request.headers.get("User-Agent"),
    )
    inquiry_id = intake_service().submit(submission)

    return jsonify({
        "success": True,
        "message": (
            f"Thank you for your message! We've assigned reference #{inquiry_id} "
            "to your inquiry and will get back to you soon."
        ),
        "referenceId": inquiry_id,
    })


@contact_bp.route("/csrf-token")
def csrf_token():
    """Token for the static front-end to send back in X-CSRFToken."""
    return jsonify({"success": True, "csrfToken": generate_csrf()})
