from datetime import datetime

from models._base import db

STATUS_NEW = "new"
STATUS_RESPONDED = "responded"
INQUIRY_STATUSES = (STATUS_NEW, STATUS_RESPONDED)

KIND_GENERAL = "general"
KIND_TEAM_SPECIFIC = "team_specific"

DEFAULT_SUBJECT = "General Inquiry"


class Inquiry(db.Model):
    """Contact form submission and its routing/status metadata."""

    __tablename__ = "client_inquiries"
    __table_args__ = (db.Index("ix_client_inquiries_status_created", "status", "created_at"),)

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(50))
    subject = db.Column(db.String(200), nullable=False, default=DEFAULT_SUBJECT)
    message = db.Column(db.Text, nullable=False)
    team_member = db.Column(db.String(50), nullable=False, default="company", index=True)
    inquiry_type = db.Column(db.String(20), nullable=False, default=KIND_GENERAL)
    status = db.Column(db.String(20), nullable=False, default=STATUS_NEW, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)
    responded_at = db.Column(db.DateTime)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.String(512))

    interactions = db.relationship(
        "Interaction",
        backref="inquiry",
        cascade="all, delete-orphan",
        lazy=True,
        order_by="Interaction.created_at",
    )

    def to_dict(self, interactions=None):
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "subject": self.subject,
            "message": self.message,
            "team_member": self.team_member,
            "inquiry_type": self.inquiry_type,
            "status": self.status,
            "created_at": _fmt(self.created_at),
            "responded_at": _fmt(self.responded_at),
        }
        if interactions is not None:
            data["interactions"] = [i.to_dict() for i in interactions]
        return data


def _fmt(value):
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else None
