import html
import logging
import re
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

import requests

from services.errors import DeliveryError

logger = logging.getLogger(__name__)

SENDGRID_API = "https://api.sendgrid.com/v3/mail/send"

_BREAK_RE = re.compile(r"<\s*(br|/p|/div|/tr|/li|/h[1-6])\s*/?\s*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"[ \t\r\f\v]+")
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")


def html_to_text(markup):
    """Plain-text alternative for an HTML body: tags stripped, whitespace collapsed."""
    text = _BREAK_RE.sub("\n", markup or "")
    text = _TAG_RE.sub("", text)
    text = html.unescape(text)
    lines = (_SPACE_RE.sub(" ", line).strip() for line in text.split("\n"))
    text = "\n".join(lines)
    return _BLANK_LINES_RE.sub("\n\n", text).strip()


@dataclass
class EmailMessage:
    from_email: str
    from_name: str
    to: str
    subject: str
    html: str
    reply_to: str | None = None

    @property
    def text(self):
        return html_to_text(self.html)


class SmtpTransport:
    def __init__(self, host, port, user, password, use_ssl=True, timeout=20):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_ssl = use_ssl
        self.timeout = timeout

    def _build_mime(self, message):
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((message.from_name, message.from_email))
        msg["To"] = message.to
        msg["Subject"] = message.subject
        if message.reply_to:
            msg["Reply-To"] = message.reply_to
        msg.attach(MIMEText(message.text, "plain", "utf-8"))
        msg.attach(MIMEText(message.html, "html", "utf-8"))
        return msg

    def deliver(self, message):
        if not all([self.host, self.user, self.password]):
            raise DeliveryError("SMTP settings are incomplete (SMTP_HOST, SMTP_USER, SMTP_PASS)")

        msg = self._build_mime(message)
        try:
            if self.use_ssl:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                    server.login(self.user, self.password)
                    server.send_message(msg)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.starttls()
                    server.login(self.user, self.password)
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError(f"SMTP delivery to {message.to} failed: {exc}") from exc


class SendGridTransport:
    def __init__(self, api_key, timeout=20):
        self.api_key = api_key
        self.timeout = timeout

    def payload(self, message):
        payload = {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": message.from_email, "name": message.from_name},
            "subject": message.subject,
            "content": [
                {"type": "text/plain", "value": message.text},
                {"type": "text/html", "value": message.html},
            ],
        }
        if message.reply_to:
            payload["reply_to"] = {"email": message.reply_to}
        return payload

    def deliver(self, message):
        if not self.api_key:
            raise DeliveryError("SENDGRID_API_KEY missing")

        try:
            r = requests.post(
                SENDGRID_API,
                json=self.payload(message),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "accept": "application/json",
                    "content-type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise DeliveryError(f"SendGrid request failed: {exc}") from exc

        if r.status_code >= 400:
            raise DeliveryError(f"SendGrid error {r.status_code} body={r.text}")


class ConsoleTransport:
    """Development transport: logs the message instead of sending it."""

    def deliver(self, message):
        logger.info("[MOCK EMAIL] To: %s | Subject: %s | Reply-To: %s", message.to, message.subject, message.reply_to)
        logger.debug("[MOCK EMAIL] Body:\n%s", message.text)


class NotificationSender:
    """Transport-agnostic email dispatch.

    send() either returns normally or raises DeliveryError; transport
    failures are never swallowed.
    """

    def __init__(self, transport, from_email, from_name):
        self.transport = transport
        self.from_email = from_email
        self.from_name = from_name

    def compose(self, to, subject, html_body, reply_to=None):
        return EmailMessage(
            from_email=self.from_email,
            from_name=self.from_name,
            to=to,
            subject=subject,
            html=html_body,
            reply_to=reply_to,
        )

    def send(self, message):
        transport_name = type(self.transport).__name__
        try:
            self.transport.deliver(message)
        except DeliveryError:
            logger.error("[EMAIL FAILED] via %s to %s | %s", transport_name, message.to, message.subject, exc_info=True)
            raise
        except Exception as exc:
            logger.error("[EMAIL FAILED] via %s to %s | %s", transport_name, message.to, message.subject, exc_info=True)
            raise DeliveryError(f"{transport_name} failed: {exc}") from exc

        logger.info("[EMAIL SENT] via %s to %s | %s", transport_name, message.to, message.subject)


def build_transport(config):
    name = (config.get("MAIL_TRANSPORT") or "smtp").lower()
    if name == "sendgrid":
        return SendGridTransport(config.get("SENDGRID_API_KEY"))
    if name == "console":
        return ConsoleTransport()
    if name == "smtp":
        return SmtpTransport(
            host=config.get("SMTP_HOST"),
            port=int(config.get("SMTP_PORT") or 465),
            user=config.get("SMTP_USER"),
            password=config.get("SMTP_PASS"),
            use_ssl=bool(config.get("SMTP_USE_SSL", True)),
        )
    raise ValueError(f"Unknown MAIL_TRANSPORT: {name!r}")


def build_notification_sender(config):
    return NotificationSender(
        transport=build_transport(config),
        from_email=config.get("MAIL_FROM_EMAIL") or config.get("SMTP_USER") or config["COMPANY_EMAIL"],
        from_name=config.get("MAIL_FROM_NAME") or config["COMPANY_NAME"],
    )
