"""SMTP delivery for the notification outbox."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional, Protocol

from hrms.config import settings

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, to_address: str, subject: str, html_body: str) -> None:
        """Deliver one message or raise."""


class SmtpMailer:
    """Blocking SMTP client; the outbox dispatcher runs it in a worker thread."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        timeout: float = 30,
    ) -> None:
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.username = settings.SMTP_USERNAME if username is None else username
        self.password = settings.SMTP_PASSWORD if password is None else password
        self.use_tls = settings.SMTP_USE_TLS if use_tls is None else use_tls
        self.timeout = timeout

    def build_message(self, to_address: str, subject: str, html_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = formataddr((settings.MAIL_SENDER_NAME, settings.MAIL_SENDER))
        msg["To"] = to_address
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML-capable mail client.")
        msg.add_alternative(html_body, subtype="html")
        return msg

    def send(self, to_address: str, subject: str, html_body: str) -> None:
        msg = self.build_message(to_address, subject, html_body)
        logger.debug("Sending mail to %s: %s", to_address, subject)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)
