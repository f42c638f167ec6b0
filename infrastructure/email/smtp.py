"""SMTP implementation of EmailProvider.

smtplib is blocking, so each send runs in a worker thread. The SMTP
connection has its own timeout; asyncio.wait_for bounds the whole send a
little above it so a stuck relay can never hold a request open indefinitely.
"""

from __future__ import annotations

import asyncio
import smtplib
from email.message import EmailMessage

from config import SmtpSettings
from infrastructure.email.protocol import EmailResult, OutgoingEmail
from shared.logging import get_logger

log = get_logger(__name__)

_MISCONFIGURED = "Email service is misconfigured. Please contact support."
_GENERIC_FAILURE = "Failed to send email. Please try again later or contact support."


class SmtpEmailProvider:
    def __init__(self, settings: SmtpSettings, *, production: bool = False) -> None:
        self._settings = settings
        self._production = production

    def _build_message(self, message: OutgoingEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._settings.smtp_from
        msg["To"] = message.to
        msg["Subject"] = message.subject
        msg.set_content(message.text_body)
        msg.add_alternative(message.html_body or message.text_body, subtype="html")
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        s = self._settings
        if s.smtp_secure:
            server: smtplib.SMTP = smtplib.SMTP_SSL(
                s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_seconds
            )
        else:
            server = smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_seconds)
        with server:
            server.ehlo()
            if not s.smtp_secure and server.has_extn("starttls"):
                server.starttls()
                server.ehlo()
            server.login(s.smtp_user, s.smtp_pass)
            server.send_message(msg)

    async def send(self, message: OutgoingEmail) -> EmailResult:
        missing = self._settings.missing_fields()
        if missing:
            log.error("email_service_misconfigured", missing=missing)
            return EmailResult(success=False, error=_MISCONFIGURED)

        try:
            msg = self._build_message(message)
            await asyncio.wait_for(
                asyncio.to_thread(self._deliver, msg),
                timeout=self._settings.smtp_send_deadline_seconds,
            )
        except asyncio.TimeoutError:
            log.error("email_send_timeout", to_email=message.to, subject=message.subject)
            return EmailResult(success=False, error=self._client_error("timed out"))
        except (smtplib.SMTPException, OSError, ValueError) as e:
            log.error(
                "email_send_error",
                to_email=message.to,
                subject=message.subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return EmailResult(success=False, error=self._client_error(str(e)))

        log.info("email_sent_success", to_email=message.to, subject=message.subject)
        return EmailResult(success=True)

    def _client_error(self, detail: str) -> str:
        if self._production:
            return _GENERIC_FAILURE
        return f"Failed to send email: {detail}"
