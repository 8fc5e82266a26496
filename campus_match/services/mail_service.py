"""Delivery of login codes by email."""

from __future__ import annotations

import logging
import smtplib
from email.mime.text import MIMEText
from typing import Any, Mapping, Optional

from campus_match.errors import DeliveryFailed

_LOGGER = logging.getLogger(__name__)

OTP_SUBJECT = "Your OTP for MNNIT Matchmaking Login"


def render_otp_body(name: str, code: str) -> str:
    return f"Hi {name},\n\nYour OTP is: {code}\n\nRegards,\nMNNIT Matchmaking Team"


class SmtpMailer:
    """Sends login codes through an SMTP server (Gmail by default)."""

    def __init__(
        self,
        host: str = "smtp.gmail.com",
        port: int = 587,
        user: Optional[str] = None,
        password: Optional[str] = None,
        from_email: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email or user
        self.timeout = timeout
        self.enabled = bool(self.host and self.user and self.password and self.from_email)
        if not self.enabled:
            _LOGGER.warning("SMTP not fully configured. Set EMAIL_USER and EMAIL_PASS.")

    def send_code(self, to_email: str, name: str, code: str) -> None:
        """Send ``code`` to ``to_email``; raise :class:`DeliveryFailed` on any error."""
        if not self.enabled:
            _LOGGER.error("SMTP delivery not enabled, cannot send OTP to %s", to_email)
            raise DeliveryFailed()

        msg = MIMEText(render_otp_body(name, code), "plain")
        msg["Subject"] = OTP_SUBJECT
        msg["From"] = self.from_email
        msg["To"] = to_email

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            _LOGGER.error("Error sending OTP to %s: %s", to_email, exc)
            raise DeliveryFailed() from exc

        _LOGGER.info("OTP sent to %s", to_email)


class ConsoleMailer:
    """Writes login codes to the log instead of sending mail (local development)."""

    def send_code(self, to_email: str, name: str, code: str) -> None:
        _LOGGER.info("OTP for %s (%s): %s", to_email, name, code)


def build_mailer(config: Mapping[str, Any]):
    """Return the mailer selected by ``MAIL_BACKEND``."""
    backend = str(config.get("MAIL_BACKEND") or "smtp").lower()
    if backend == "console":
        return ConsoleMailer()
    return SmtpMailer(
        host=config.get("SMTP_HOST") or "smtp.gmail.com",
        port=int(config.get("SMTP_PORT") or 587),
        user=config.get("EMAIL_USER"),
        password=config.get("EMAIL_PASS"),
    )
