"""Jinja2 rendering for transactional email bodies.

Each builder returns an OutgoingEmail with both a plain-text and an HTML
body. HTML comes from templates/emails/; plain text is built inline.
"""

from __future__ import annotations

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from infrastructure.email.protocol import OutgoingEmail
from schemas.models.organizer_application import ApplicationStatus
from schemas.models.verification_code import VerificationPurpose

_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)

APP_NAME = "Event Horizon"


class EmailTemplates:
    def __init__(
        self,
        app_url: str = "http://localhost:3000",
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._app_url = app_url
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def verification_code(
        self, email: str, code: str, purpose: VerificationPurpose, ttl_minutes: int
    ) -> OutgoingEmail:
        is_reset = purpose is VerificationPurpose.PASSWORD_RESET
        if is_reset:
            subject = f"Your Password Reset Code - {APP_NAME}"
            text_body = (
                f"You requested to reset your password. Your verification code is: {code}. "
                f"This code will expire in {ttl_minutes} minutes. "
                "If you did not request this, please ignore this email."
            )
        else:
            subject = f"Your Verification Code - {APP_NAME}"
            text_body = (
                f"Your verification code is: {code}. "
                f"This code will expire in {ttl_minutes} minutes."
            )

        html_body = self._jinja.get_template("verification_code.html").render(
            subject=subject,
            code=code,
            ttl_minutes=ttl_minutes,
            is_reset=is_reset,
            app_name=APP_NAME,
            app_url=self._app_url,
        )
        return OutgoingEmail(to=email, subject=subject, text_body=text_body, html_body=html_body)

    def application_status(
        self,
        email: str,
        full_name: Optional[str],
        status: ApplicationStatus,
        feedback: str,
    ) -> OutgoingEmail:
        subject = f"Your organizer application was {status.value} - {APP_NAME}"
        greeting = f"Hello {full_name}," if full_name else "Hello,"
        if status is ApplicationStatus.ACCEPTED:
            outcome = "Congratulations! Your organizer application has been accepted."
            next_step = f"You can now create events from your dashboard: {self._app_url}/organizer"
        else:
            outcome = "Your organizer application was not accepted this time."
            next_step = f"You may submit a new application: {self._app_url}/organizer/apply"

        text_lines = [greeting, "", outcome]
        if feedback:
            text_lines += ["", f"Reviewer feedback: {feedback}"]
        text_lines += ["", next_step]

        html_body = self._jinja.get_template("application_status.html").render(
            subject=subject,
            full_name=full_name,
            accepted=status is ApplicationStatus.ACCEPTED,
            outcome=outcome,
            feedback=feedback,
            app_name=APP_NAME,
            app_url=self._app_url,
        )
        return OutgoingEmail(
            to=email, subject=subject, text_body="\n".join(text_lines), html_body=html_body
        )
