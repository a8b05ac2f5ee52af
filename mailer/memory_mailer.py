"""In-memory mail backend for development and tests."""

from __future__ import annotations

from dataclasses import dataclass

from .abstract_mailer import AbstractMailer, MailDeliveryError


@dataclass
class SentMessage:
    sender: str
    recipient: str
    subject: str
    html: str


class MemoryMailer(AbstractMailer):
    """Collect messages in ``outbox`` instead of sending them.

    Setting ``fail`` makes every send raise, which simulates an unreachable
    relay.
    """

    def __init__(self, sender_name: str | None = None, sender_address: str | None = None):
        super().__init__(sender_name, sender_address)
        self.outbox: list[SentMessage] = []
        self.fail = False

    def send(self, recipient: str, subject: str, html: str) -> None:
        if self.fail:
            raise MailDeliveryError("Mail relay unavailable.")
        self.outbox.append(SentMessage(self.from_header, recipient, subject, html))
