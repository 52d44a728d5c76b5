"""Persistence store for inquiries, their interaction log and admin accounts.

Every write is committed on its own; a failed commit is rolled back and
re-raised as StoreError so readers never see a half-written row.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import AdminLoginAttempt, AdminUser, Inquiry, Interaction, db
from models.inquiry import STATUS_NEW, STATUS_RESPONDED
from models.interaction import INTERACTION_KINDS
from services.admin_service import hash_password
from services.errors import NotFoundError, StoreError

logger = logging.getLogger(__name__)

RECENT_DAYS = 7


class InquiryStore:
    def __init__(self, database=db):
        self.db = database

    @property
    def session(self):
        return self.db.session

    @contextmanager
    def _write(self, action):
        try:
            yield
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Store write failed (%s): %s", action, exc, exc_info=True)
            raise StoreError(f"{action} failed") from exc

    @contextmanager
    def _read(self, action):
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Store read failed (%s): %s", action, exc, exc_info=True)
            raise StoreError(f"{action} failed") from exc

    # ── Schema ──

    def init_schema(self, admin_username, admin_password):
        """Create missing tables and seed the default admin account."""
        with self._read("create schema"):
            self.db.create_all()
        return self.seed_admin(admin_username, admin_password)

    def seed_admin(self, username, password):
        if AdminUser.query.filter_by(username=username).first():
            return False
        if not password:
            logger.warning("ADMIN_PASSWORD is not set; default admin account '%s' not created", username)
            return False

        try:
            self.session.add(AdminUser(username=username, password_hash=hash_password(password)))
            self.session.commit()
        except IntegrityError:
            # another process seeded the same account first
            self.session.rollback()
            return False
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError("seed admin failed") from exc

        logger.info("Default admin account '%s' created", username)
        return True

    # ── Inquiries ──

    def create_inquiry(self, **fields):
        inquiry = Inquiry(**fields)
        with self._write("insert inquiry"):
            self.session.add(inquiry)
        return inquiry

    def get_inquiry(self, inquiry_id):
        with self._read("get inquiry"):
            return self.session.get(Inquiry, inquiry_id)

    def require_inquiry(self, inquiry_id):
        inquiry = self.get_inquiry(inquiry_id)
        if inquiry is None:
            raise NotFoundError("Inquiry not found")
        return inquiry

    def list_inquiries(self, limit=50):
        with self._read("list inquiries"):
            return (
                Inquiry.query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
                .limit(limit)
                .all()
            )

    def update_status(self, inquiry_id, status, now=None):
        """Single UPDATE; responded_at follows the most recent transition."""
        now = now or datetime.now()
        values = {
            "status": status,
            "responded_at": now if status == STATUS_RESPONDED else None,
        }
        with self._write("update inquiry status"):
            updated = Inquiry.query.filter_by(id=inquiry_id).update(values, synchronize_session=False)
        if not updated:
            raise NotFoundError("Inquiry not found")
        return updated

    def stats(self, now=None):
        now = now or datetime.now()
        cutoff = now - timedelta(days=RECENT_DAYS)

        with self._read("inquiry stats"):
            total, pending, recent = self.session.query(
                func.count(Inquiry.id),
                func.sum(case((Inquiry.status == STATUS_NEW, 1), else_=0)),
                func.sum(case((Inquiry.created_at > cutoff, 1), else_=0)),
            ).one()
            distribution = (
                self.session.query(Inquiry.team_member, func.count(Inquiry.id))
                .group_by(Inquiry.team_member)
                .order_by(Inquiry.team_member)
                .all()
            )

        return {
            "totalInquiries": total or 0,
            "pendingInquiries": pending or 0,
            "teamDistribution": [
                {"team_member": member, "count": count} for member, count in distribution
            ],
            "recentInquiries": recent or 0,
        }

    def clear_all(self):
        """Bulk-delete every inquiry and interaction. Non-production resets only."""
        with self._write("clear inquiries"):
            interactions = Interaction.query.delete(synchronize_session=False)
            inquiries = Inquiry.query.delete(synchronize_session=False)
        logger.warning("CLEAR DATA completed: %d inquiries, %d interactions", inquiries, interactions)
        return {"inquiries": inquiries, "interactions": interactions}

    # ── Interactions ──

    def add_interaction(self, inquiry_id, kind, description, follow_up_required=False, follow_up_date=None):
        if kind not in INTERACTION_KINDS:
            raise ValueError(f"unknown interaction kind: {kind}")
        interaction = Interaction(
            inquiry_id=inquiry_id,
            interaction_type=kind,
            description=description,
            follow_up_required=follow_up_required,
            follow_up_date=follow_up_date,
        )
        with self._write("insert interaction"):
            self.session.add(interaction)
        return interaction

    def list_interactions(self, inquiry_id):
        with self._read("list interactions"):
            return (
                Interaction.query.filter_by(inquiry_id=inquiry_id)
                .order_by(Interaction.created_at, Interaction.id)
                .all()
            )

    # ── Admin accounts ──

    def get_active_admin(self, username):
        with self._read("get admin"):
            return AdminUser.query.filter_by(username=username, is_active=True).first()

    def get_admin(self, admin_id):
        if admin_id is None:
            return None
        with self._read("get admin"):
            return self.session.get(AdminUser, admin_id)

    def record_login(self, admin, now=None):
        with self._write("update last login"):
            admin.last_login = now or datetime.now()

    def recent_attempt_count(self, ip, block_seconds):
        cutoff = datetime.now() - timedelta(seconds=block_seconds)
        with self._read("count login attempts"):
            return AdminLoginAttempt.query.filter(
                AdminLoginAttempt.ip == ip,
                AdminLoginAttempt.created_at >= cutoff,
            ).count()

    def record_failed_attempt(self, ip):
        with self._write("record login attempt"):
            self.session.add(AdminLoginAttempt(ip=ip))

    def clear_attempts(self, ip):
        with self._write("clear login attempts"):
            AdminLoginAttempt.query.filter(AdminLoginAttempt.ip == ip).delete()

    def purge_expired_attempts(self, block_seconds):
        cutoff = datetime.now() - timedelta(seconds=block_seconds)
        with self._write("purge login attempts"):
            AdminLoginAttempt.query.filter(AdminLoginAttempt.created_at < cutoff).delete()
