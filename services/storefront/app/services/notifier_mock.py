from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SentEmail:
    to: str
    subject: str
    text: str
    html: str


class MockNotifier:
    """Records messages in memory instead of sending them."""

    name = "mock"

    def __init__(self) -> None:
        self.sent: list[SentEmail] = []

    def send(self, to: str, subject: str, text: str, html: str) -> None:
        self.sent.append(SentEmail(to=to, subject=subject, text=text, html=html))
