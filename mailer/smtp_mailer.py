"""SMTP mail backend."""

from __future__ import annotations

import smtplib
from email.message import EmailMessage

from .abstract_mailer import AbstractMailer, MailDeliveryError


class SMTPMailer(AbstractMailer):
    """Send messages through an SMTP relay, upgrading with STARTTLS when enabled."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        *,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: int = 10,
        sender_name: str | None = None,
        sender_address: str | None = None,
    ):
        super().__init__(sender_name, sender_address or username)
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def _build_message(self, recipient: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.from_header
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable email client.")
        message.add_alternative(html, subtype="html")
        return message

    def send(self, recipient: str, subject: str, html: str) -> None:
        message = self._build_message(recipient, subject, html)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(str(exc)) from exc
