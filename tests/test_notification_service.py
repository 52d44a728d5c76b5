"""Notification sender and its SMTP / SendGrid transports."""
import smtplib

import pytest
import requests

from services import notification_service
from services.errors import DeliveryError
from services.notification_service import (
    ConsoleTransport,
    EmailMessage,
    NotificationSender,
    SendGridTransport,
    SmtpTransport,
    build_transport,
    html_to_text,
)


def _message(**overrides):
    data = {
        "from_email": "noreply@menumakers.test",
        "from_name": "Menu Makers",
        "to": "alice@example.com",
        "subject": "Hello",
        "html": "<div><p>Hi &amp; welcome</p><p>Line   two</p></div>",
        "reply_to": "inbox@menumakers.test",
    }
    data.update(overrides)
    return EmailMessage(**data)


def test_html_to_text():
    text = html_to_text("<h1>Title</h1>\n\n   <p>First&nbsp;para</p><br>  <b>bold</b>   text  ")
    assert "<" not in text
    assert "Title" in text
    assert "bold text" in text
    assert "  " not in text.replace("\xa0", " ")


def test_message_text_derived_from_html():
    assert _message().text == "Hi & welcome\nLine two"


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.logged_in = None
        self.sent = []
        self.started_tls = False
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg):
        self.sent.append(msg)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP_SSL", FakeSMTP)
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def test_smtp_ssl_delivery(fake_smtp):
    transport = SmtpTransport("smtp.example.com", 465, "user@example.com", "secret")
    transport.deliver(_message())

    server = fake_smtp.instances[0]
    assert (server.host, server.port) == ("smtp.example.com", 465)
    assert server.logged_in == ("user@example.com", "secret")
    msg = server.sent[0]
    assert msg["To"] == "alice@example.com"
    assert msg["Reply-To"] == "inbox@menumakers.test"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


def test_smtp_starttls_delivery(fake_smtp):
    SmtpTransport("smtp.example.com", 587, "u", "p", use_ssl=False).deliver(_message())
    assert fake_smtp.instances[0].started_tls is True


def test_smtp_missing_credentials():
    with pytest.raises(DeliveryError):
        SmtpTransport("smtp.example.com", 465, None, None).deliver(_message())


def test_smtp_failure_raises_delivery_error(monkeypatch):
    class BrokenSMTP(FakeSMTP):
        def login(self, user, password):
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    monkeypatch.setattr(smtplib, "SMTP_SSL", BrokenSMTP)
    with pytest.raises(DeliveryError):
        SmtpTransport("smtp.example.com", 465, "u", "p").deliver(_message())


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


def test_sendgrid_payload_and_headers(monkeypatch):
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append((url, json, headers))
        return FakeResponse(202)

    monkeypatch.setattr(notification_service.requests, "post", fake_post)
    SendGridTransport("SG.key").deliver(_message())

    url, payload, headers = calls[0]
    assert url == notification_service.SENDGRID_API
    assert headers["Authorization"] == "Bearer SG.key"
    assert payload["personalizations"] == [{"to": [{"email": "alice@example.com"}]}]
    assert payload["from"] == {"email": "noreply@menumakers.test", "name": "Menu Makers"}
    assert payload["reply_to"] == {"email": "inbox@menumakers.test"}
    assert [c["type"] for c in payload["content"]] == ["text/plain", "text/html"]


def test_sendgrid_http_error(monkeypatch):
    monkeypatch.setattr(notification_service.requests, "post", lambda *a, **kw: FakeResponse(401, "unauthorized"))
    with pytest.raises(DeliveryError):
        SendGridTransport("SG.key").deliver(_message())


def test_sendgrid_network_error(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(notification_service.requests, "post", boom)
    with pytest.raises(DeliveryError):
        SendGridTransport("SG.key").deliver(_message())


def test_sendgrid_missing_key():
    with pytest.raises(DeliveryError):
        SendGridTransport(None).deliver(_message())


def test_sender_wraps_unexpected_transport_errors():
    class Exploding:
        def deliver(self, message):
            raise RuntimeError("boom")

    sender = NotificationSender(Exploding(), "noreply@menumakers.test", "Menu Makers")
    with pytest.raises(DeliveryError):
        sender.send(_message())


def test_compose_uses_sender_identity():
    sender = NotificationSender(ConsoleTransport(), "noreply@menumakers.test", "Menu Makers")
    message = sender.compose("bob@example.com", "Hi", "<p>Hello</p>")
    assert message.from_email == "noreply@menumakers.test"
    assert message.from_name == "Menu Makers"
    assert message.reply_to is None
    sender.send(message)


def test_build_transport_selection():
    assert isinstance(build_transport({"MAIL_TRANSPORT": "sendgrid", "SENDGRID_API_KEY": "k"}), SendGridTransport)
    assert isinstance(build_transport({"MAIL_TRANSPORT": "console"}), ConsoleTransport)
    smtp = build_transport({"MAIL_TRANSPORT": "smtp", "SMTP_HOST": "h", "SMTP_PORT": "587", "SMTP_USE_SSL": False})
    assert isinstance(smtp, SmtpTransport)
    assert smtp.port == 587
    assert smtp.use_ssl is False
    with pytest.raises(ValueError):
        build_transport({"MAIL_TRANSPORT": "carrier-pigeon"})
