"""Transactional emails for account verification and password reset."""

from __future__ import annotations

from flask import current_app, render_template

from . import get_mailer
from .abstract_mailer import MailDeliveryError


def _sign_in_url() -> str:
    return current_app.config.get("APP_BASE_URL", "").rstrip("/") + "/signin"


def _deliver(recipient: str, subject: str, template: str, **context) -> None:
    html = render_template(template, **context)
    try:
        get_mailer().send(recipient, subject, html)
    except MailDeliveryError:
        current_app.logger.error("Failed to send %r email to %s", subject, recipient)
        raise
    current_app.logger.info("Sent %r email to %s", subject, recipient)


def send_verification_email(email: str, code: str, name: str) -> None:
    _deliver(
        email,
        "Verify Your Email",
        "email/verification.html",
        code=code,
        name=name,
        ttl_minutes=current_app.config.get("VERIFICATION_CODE_TTL_MINUTES", 15),
    )


def send_welcome_email(email: str, name: str) -> None:
    _deliver(email, "Welcome to Our Platform!", "email/welcome.html", name=name, login_url=_sign_in_url())


def send_password_reset_email(email: str, code: str, name: str) -> None:
    _deliver(
        email,
        "Reset Your Password",
        "email/password_reset.html",
        code=code,
        name=name,
        ttl_minutes=current_app.config.get("VERIFICATION_CODE_TTL_MINUTES", 15),
    )


def send_reset_success_email(email: str) -> None:
    _deliver(email, "Password Reset Successful", "email/password_reset_success.html", login_url=_sign_in_url())
