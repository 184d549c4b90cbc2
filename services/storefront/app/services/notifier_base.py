from __future__ import annotations

from typing import Protocol


class NotificationError(Exception):
    """Raised by a notifier when a message could not be handed off for delivery."""


class Notifier(Protocol):
    name: str

    def send(self, to: str, subject: str, text: str, html: str) -> None: ...
