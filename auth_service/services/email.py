"""Transactional email: verification, welcome, password reset."""

import logging
from pathlib import Path
from typing import Protocol

import resend
from jinja2 import Environment, FileSystemLoader, select_autoescape

from auth_service.config import Settings

logger = logging.getLogger("auth_service")

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"


class EmailSender(Protocol):
    def send(self, to_email: str, subject: str, html: str) -> None: ...


class ResendEmailSender:
    """Delivers mail through the Resend API. Raises on provider errors."""

    def __init__(self, api_key: str, sender: str) -> None:
        self.api_key = api_key
        self.sender = sender

    def send(self, to_email: str, subject: str, html: str) -> None:
        resend.api_key = self.api_key
        response = resend.Emails.send(
            {
                "from": self.sender,
                "to": [to_email],
                "subject": subject,
                "html": html,
            }
        )
        logger.info("Email sent to=%s subject=%s id=%s", to_email, subject, response.get("id"))


class LogOnlyEmailSender:
    """Used when no provider is configured. The body is not logged since it carries tokens."""

    def send(self, to_email: str, subject: str, html: str) -> None:
        logger.warning("Email not delivered (no provider configured) to=%s subject=%s", to_email, subject)


def _humanize(minutes: int) -> str:
    """Render a token lifetime for email copy, e.g. ``60`` -> ``"1 hour"``."""
    if minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} minutes"


class EmailService:
    """Renders email templates and hands them to a sender."""

    def __init__(self, settings: Settings, sender: EmailSender | None = None) -> None:
        self.client_url = settings.CLIENT_URL
        self.verification_ttl = _humanize(settings.VERIFICATION_TOKEN_TTL_HOURS * 60)
        self.reset_ttl = _humanize(settings.RESET_TOKEN_TTL_MINUTES)
        if sender is None:
            if settings.RESEND_API_KEY:
                sender = ResendEmailSender(settings.RESEND_API_KEY, settings.EMAIL_FROM)
            else:
                sender = LogOnlyEmailSender()
        self.sender = sender
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html"]),
        )

    def _send(self, to_email: str, subject: str, template: str, **context) -> None:
        html = self.env.get_template(template).render(**context)
        self.sender.send(to_email, subject, html)

    def send_verification_email(self, email: str, verification_code: str) -> None:
        self._send(
            email,
            "Verify your email",
            "verification.html",
            verification_code=verification_code,
            expires_in=self.verification_ttl,
        )

    def send_welcome_email(self, email: str, name: str) -> None:
        self._send(email, "Welcome aboard", "welcome.html", name=name, client_url=self.client_url)

    def reset_url(self, token: str) -> str:
        return f"{self.client_url}/reset-password/{token}"

    def send_password_reset_email(self, email: str, token: str) -> None:
        self._send(
            email,
            "Reset your password",
            "password_reset_request.html",
            reset_url=self.reset_url(token),
            expires_in=self.reset_ttl,
        )

    def send_reset_success_email(self, email: str) -> None:
        self._send(email, "Password reset successful", "password_reset_success.html")
