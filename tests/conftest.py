import os
from pathlib import Path

import pytest

# Configure a dedicated SQLite DB and mail setup before importing the Flask app.
TEST_DB_PATH = Path(__file__).resolve().parent / "pytest_menumakers.db"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "test_admin_password"
COMPANY_EMAIL = "inbox@menumakers.test"
JATINDER_EMAIL = "jatinder@menumakers.test"

os.environ["FLASK_ENV"] = "development"
os.environ["SECRET_KEY"] = "test_secret_key"
os.environ["ADMIN_USERNAME"] = ADMIN_USERNAME
os.environ["ADMIN_PASSWORD"] = ADMIN_PASSWORD
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH.as_posix()}"
os.environ["MAIL_TRANSPORT"] = "console"
os.environ["COMPANY_EMAIL"] = COMPANY_EMAIL
os.environ["JATINDER_EMAIL"] = JATINDER_EMAIL
for _key in ("MANSI_EMAIL", "MADHUSUDAN_EMAIL", "RAMESH_EMAIL", "CONTACT_RATE_LIMIT"):
    os.environ.pop(_key, None)

from app import app as _flask_app, db
from extensions import limiter
from models import AdminUser
from services.errors import DeliveryError
from services.inquiry_store import InquiryStore
from services.notification_service import NotificationSender


class RecordingTransport:
    """Keeps delivered messages in memory; recipients in fail_for are refused."""

    def __init__(self):
        self.sent = []
        self.fail_for = set()

    def deliver(self, message):
        if message.to in self.fail_for:
            raise DeliveryError(f"delivery to {message.to} refused")
        self.sent.append(message)


@pytest.fixture
def outbox():
    return RecordingTransport()


@pytest.fixture
def flask_app(outbox):
    _flask_app.config["TESTING"] = True
    _flask_app.config["WTF_CSRF_ENABLED"] = False
    _flask_app.config["ALLOW_DATA_RESET"] = True
    _flask_app.extensions["notification_sender"] = NotificationSender(
        outbox, "noreply@menumakers.test", "Menu Makers"
    )

    with _flask_app.app_context():
        limiter.reset()
        db.session.remove()
        db.drop_all()
        db.create_all()
        InquiryStore(db).seed_admin(ADMIN_USERNAME, ADMIN_PASSWORD)
        yield _flask_app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(flask_app):
    with flask_app.test_client() as client:
        yield client


@pytest.fixture
def admin_client(client, flask_app):
    """Client whose session already belongs to the seeded admin."""
    with flask_app.app_context():
        admin = AdminUser.query.filter_by(username=ADMIN_USERNAME).one()
        admin_id = admin.id

    with client.session_transaction() as sess:
        sess["is_admin"] = True
        sess["admin_id"] = admin_id
        sess["admin_username"] = ADMIN_USERNAME
    return client
