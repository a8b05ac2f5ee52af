"""Mail delivery abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod


class MailDeliveryError(RuntimeError):
    """Raised when a message could not be handed to the mail relay."""


class AbstractMailer(ABC):
    """Interface for outbound mail backends."""

    def __init__(self, sender_name: str | None, sender_address: str | None):
        self.sender_name = sender_name or ""
        self.sender_address = sender_address or ""

    @property
    def from_header(self) -> str:
        if self.sender_name and self.sender_address:
            return f"{self.sender_name} <{self.sender_address}>"
        return self.sender_address

    @abstractmethod
    def send(self, recipient: str, subject: str, html: str) -> None:
        """Deliver an HTML message or raise ``MailDeliveryError``."""
