"""Admin session gate and inquiry management operations."""

import logging
from datetime import datetime

import bcrypt
from flask import render_template

from models.inquiry import INQUIRY_STATUSES, STATUS_RESPONDED
from models.interaction import INTERACTION_ADMIN_REPLY, INTERACTION_STATUS_UPDATE
from services.errors import AuthError, NotFoundError, TooManyAttemptsError, ValidationError
from services.inquiry_service import is_valid_email, single_line

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, stored: str | None) -> bool:
    if not plain or not stored:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def parse_inquiry_id(value):
    try:
        inquiry_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid inquiry id.") from None
    if inquiry_id < 1:
        raise NotFoundError("Inquiry not found")
    return inquiry_id


def _text(value, field):
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be text.")
    return value.strip()


class AdminSessionGate:
    """Authenticates operators and keeps the result in the session mapping."""

    def __init__(self, store, max_attempts=5, block_seconds=300):
        self.store = store
        self.max_attempts = max_attempts
        self.block_seconds = block_seconds

    def login(self, session, username, password, ip):
        username = _text(username, "Username")
        if password is not None and not isinstance(password, str):
            raise ValidationError("Password must be text.")
        if not username or not password:
            raise ValidationError("Username and password are required")

        self.store.purge_expired_attempts(self.block_seconds)
        if self.store.recent_attempt_count(ip, self.block_seconds) >= self.max_attempts:
            logger.warning("Login blocked for IP %s due to too many failed attempts", ip)
            raise TooManyAttemptsError()

        admin = self.store.get_active_admin(username)
        if admin is None or not verify_password(password, admin.password_hash):
            self.store.record_failed_attempt(ip)
            logger.warning("Failed login attempt for username %r from %s", username, ip)
            raise AuthError("Invalid username or password")

        self.store.clear_attempts(ip)
        self.store.record_login(admin)

        session.clear()
        session["is_admin"] = True
        session["admin_username"] = admin.username
        session["admin_id"] = admin.id
        session.permanent = True
        logger.info("Admin login success for %s from %s", admin.username, ip)
        return admin

    def logout(self, session):
        username = session.get("admin_username")
        session.clear()
        if username:
            logger.info("Admin %s logged out", username)

    def check(self, session):
        """Returns (authenticated, username)."""
        if not session.get("is_admin"):
            return False, None
        admin = self.store.get_admin(session.get("admin_id"))
        if admin is None or not admin.is_active:
            session.clear()
            return False, None
        return True, admin.username


class InquiryManagementService:
    def __init__(self, store, sender, company_name, company_email):
        self.store = store
        self.sender = sender
        self.company_name = company_name
        self.company_email = company_email

    def list(self, limit=DEFAULT_LIST_LIMIT):
        limit = max(1, min(int(limit), DEFAULT_LIST_LIMIT))
        return self.store.list_inquiries(limit)

    def get(self, inquiry_id):
        return self.store.require_inquiry(parse_inquiry_id(inquiry_id))

    def history(self, inquiry_id):
        return self.store.list_interactions(inquiry_id)

    def stats(self):
        return self.store.stats()

    def set_status(self, inquiry_id, status):
        """Any transition between the two statuses is allowed and always logged."""
        if status not in INQUIRY_STATUSES:
            raise ValidationError('Invalid status. Must be "new" or "responded"')
        inquiry_id = parse_inquiry_id(inquiry_id)

        self.store.update_status(inquiry_id, status)
        self.store.add_interaction(inquiry_id, INTERACTION_STATUS_UPDATE, f"Status updated to: {status}")
        logger.info("Inquiry #%s marked as %s", inquiry_id, status)

    def reply(self, to, subject, message, inquiry_id=None, reply_to=None):
        """Send a free-form reply; tied to an inquiry it also resolves it."""
        to = _text(to, "Recipient")
        subject = single_line(_text(subject, "Subject"))
        message = _text(message, "Message")
        reply_to = _text(reply_to, "Reply-to") or None

        if not to or not subject or not message:
            raise ValidationError("To, subject, and message are required fields.")
        if not is_valid_email(to):
            raise ValidationError("Please provide a valid recipient email address.")
        if reply_to and not is_valid_email(reply_to):
            raise ValidationError("Please provide a valid reply-to email address.")

        if inquiry_id not in (None, ""):
            inquiry_id = parse_inquiry_id(inquiry_id)
            self.store.require_inquiry(inquiry_id)
        else:
            inquiry_id = None

        html_body = render_template(
            "emails/admin_reply.html",
            message=message,
            inquiry_id=inquiry_id,
            company_name=self.company_name,
            company_email=self.company_email,
            sent_at=datetime.now(),
        )
        email = self.sender.compose(
            to=to,
            subject=f"Re: [#{inquiry_id}] {subject}" if inquiry_id else subject,
            html_body=html_body,
            reply_to=reply_to or self.sender.from_email,
        )
        self.sender.send(email)
        logger.info("Email sent from admin panel to: %s", to)

        if inquiry_id:
            self.store.add_interaction(
                inquiry_id,
                INTERACTION_ADMIN_REPLY,
                f"Email sent from admin panel to {to}. Subject: {subject}",
                follow_up_required=False,
            )
            self.store.update_status(inquiry_id, STATUS_RESPONDED)
            logger.info("Inquiry #%s marked as responded", inquiry_id)

    def clear_all(self):
        return self.store.clear_all()
