"""Contact form intake: validate, persist, route, notify, log."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from flask import render_template

from models.inquiry import DEFAULT_SUBJECT, KIND_GENERAL, KIND_TEAM_SPECIFIC, STATUS_NEW
from models.interaction import INTERACTION_EMAIL_SENT
from services.errors import DeliveryError, ValidationError

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value):
    return bool(EMAIL_PATTERN.fullmatch(value or ""))


def _clean(value):
    return str(value).strip() if value is not None else ""


def single_line(value):
    """Collapse line breaks and runs of whitespace, for values used in mail headers."""
    return " ".join(value.split()) if value else value


@dataclass
class Submission:
    name: str
    email: str
    message: str
    phone: str | None = None
    subject: str | None = None
    team_member: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    @classmethod
    def from_form(cls, data, ip_address=None, user_agent=None):
        return cls(
            name=_clean(data.get("name")),
            email=_clean(data.get("email")),
            message=_clean(data.get("message")),
            phone=_clean(data.get("phone")) or None,
            subject=single_line(_clean(data.get("subject"))) or None,
            team_member=_clean(data.get("teamMember") or data.get("team_member")) or None,
            ip_address=ip_address,
            user_agent=user_agent,
        )

    def validate(self):
        if not self.name or not self.email or not self.message:
            raise ValidationError("Name, email, and message are required fields.")
        if not is_valid_email(self.email):
            raise ValidationError("Please provide a valid email address.")


class InquiryIntakeService:
    def __init__(self, store, sender, directory, company_name, company_email, follow_up_hours=48):
        self.store = store
        self.sender = sender
        self.directory = directory
        self.company_name = company_name
        self.company_email = company_email
        self.follow_up_hours = follow_up_hours

    def submit(self, submission):
        """Returns the new inquiry id.

        The inquiry row is kept even when delivery fails; the DeliveryError
        still reaches the caller.
        """
        submission.validate()

        team_member = self.directory.normalize(submission.team_member)
        target = self.directory.resolve(team_member)

        inquiry = self.store.create_inquiry(
            name=submission.name,
            email=submission.email,
            phone=submission.phone,
            subject=submission.subject or DEFAULT_SUBJECT,
            message=submission.message,
            team_member=team_member,
            inquiry_type=KIND_GENERAL if target.is_company else KIND_TEAM_SPECIFIC,
            status=STATUS_NEW,
            ip_address=submission.ip_address,
            user_agent=submission.user_agent,
        )
        logger.info("Inquiry stored with ID: %s (team_member=%s)", inquiry.id, team_member)

        staff_message, ack_message = self.build_messages(inquiry, target)

        # staff notification first; no acknowledgment if it fails
        self.sender.send(staff_message)

        ack_error = None
        try:
            self.sender.send(ack_message)
        except DeliveryError as exc:
            ack_error = exc

        description = f"Initial contact email sent to {target.name}"
        if ack_error is not None:
            description += "; acknowledgment to submitter failed"
        self.store.add_interaction(
            inquiry.id,
            INTERACTION_EMAIL_SENT,
            description,
            follow_up_required=True,
            follow_up_date=inquiry.created_at + timedelta(hours=self.follow_up_hours),
        )

        if ack_error is not None:
            raise ack_error

        logger.info("Contact form submission #%s processed successfully", inquiry.id)
        return inquiry.id

    def build_messages(self, inquiry, target):
        context = {
            "inquiry": inquiry,
            "target": target,
            "company_name": self.company_name,
            "company_email": self.company_email,
            "received_at": inquiry.created_at or datetime.now(),
        }
        staff = self.sender.compose(
            to=target.email,
            subject=f"[#{inquiry.id}] New Contact: {inquiry.subject}",
            html_body=render_template("emails/staff_notification.html", **context),
            reply_to=inquiry.email,
        )
        ack = self.sender.compose(
            to=inquiry.email,
            subject=f"Thank you for contacting {self.company_name}! [Reference: #{inquiry.id}]",
            html_body=render_template("emails/acknowledgment.html", **context),
            reply_to=self.company_email,
        )
        return staff, ack
