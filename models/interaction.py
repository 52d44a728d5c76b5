from datetime import datetime

from models._base import db

INTERACTION_EMAIL_SENT = "email_sent"
INTERACTION_STATUS_UPDATE = "status_update"
INTERACTION_ADMIN_REPLY = "admin_reply"
INTERACTION_KINDS = (INTERACTION_EMAIL_SENT, INTERACTION_STATUS_UPDATE, INTERACTION_ADMIN_REPLY)


class Interaction(db.Model):
    """Append-only audit record attached to an inquiry."""

    __tablename__ = "client_interactions"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    inquiry_id = db.Column(
        db.Integer, db.ForeignKey("client_inquiries.id"), nullable=False, index=True
    )
    interaction_type = db.Column(db.String(30), nullable=False)
    description = db.Column(db.Text, default="")
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    follow_up_required = db.Column(db.Boolean, nullable=False, default=False)
    follow_up_date = db.Column(db.DateTime)

    def to_dict(self):
        return {
            "id": self.id,
            "inquiry_id": self.inquiry_id,
            "interaction_type": self.interaction_type,
            "description": self.description,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M:%S") if self.created_at else None,
            "follow_up_required": bool(self.follow_up_required),
            "follow_up_date": (
                self.follow_up_date.strftime("%Y-%m-%d %H:%M:%S") if self.follow_up_date else None
            ),
        }
