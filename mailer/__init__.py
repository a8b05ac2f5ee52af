"""Mail backends."""

from flask import current_app

from .abstract_mailer import AbstractMailer, MailDeliveryError
from .memory_mailer import MemoryMailer
from .smtp_mailer import SMTPMailer

__all__ = ["AbstractMailer", "MailDeliveryError", "MemoryMailer", "SMTPMailer", "get_mailer"]


def _build_mailer(config) -> AbstractMailer:
    backend = (config.get("MAIL_BACKEND") or "smtp").lower()
    if backend == "memory":
        return MemoryMailer(config.get("MAIL_SENDER_NAME"), config.get("MAIL_SENDER_ADDRESS"))
    if backend == "smtp":
        return SMTPMailer(
            config.get("MAIL_SERVER", "localhost"),
            int(config.get("MAIL_PORT", 587)),
            username=config.get("MAIL_USERNAME"),
            password=config.get("MAIL_PASSWORD"),
            use_tls=bool(config.get("MAIL_USE_TLS", True)),
            timeout=int(config.get("MAIL_TIMEOUT", 10)),
            sender_name=config.get("MAIL_SENDER_NAME"),
            sender_address=config.get("MAIL_SENDER_ADDRESS"),
        )
    raise ValueError(f"Unknown MAIL_BACKEND: {backend}")


def get_mailer() -> AbstractMailer:
    """Return the mailer for the current app, building it on first use."""

    mailer = current_app.extensions.get("mailer")
    if mailer is None:
        mailer = _build_mailer(current_app.config)
        current_app.extensions["mailer"] = mailer
    return mailer
