from __future__ import annotations

import os
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from services.storefront.app.services.notifier_base import NotificationError


@dataclass(frozen=True, slots=True)
class _SmtpConfig:
    host: str
    port: int
    username: str | None
    password: str | None
    sender: str
    starttls: bool
    timeout_s: float


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "y"}


class SmtpNotifier:
    """Sends multipart (plain text + HTML) email over SMTP.

    Env vars:
    - ELECTROHUB_NOTIFIER=smtp
    - ELECTROHUB_SMTP_HOST (default: localhost)
    - ELECTROHUB_SMTP_PORT (default: 587)
    - ELECTROHUB_SMTP_USERNAME / ELECTROHUB_SMTP_PASSWORD (optional; login is skipped when unset)
    - ELECTROHUB_SMTP_SENDER (default: orders@electrohub.local)
    - ELECTROHUB_SMTP_STARTTLS (default: true)
    - ELECTROHUB_SMTP_TIMEOUT_S (default: 10)
    """

    name = "smtp"

    def __init__(self, cfg: _SmtpConfig) -> None:
        self._cfg = cfg

    @classmethod
    def from_env(cls) -> "SmtpNotifier":
        return cls(
            _SmtpConfig(
                host=os.getenv("ELECTROHUB_SMTP_HOST", "localhost"),
                port=int(os.getenv("ELECTROHUB_SMTP_PORT", "587")),
                username=os.getenv("ELECTROHUB_SMTP_USERNAME") or None,
                password=os.getenv("ELECTROHUB_SMTP_PASSWORD") or None,
                sender=os.getenv("ELECTROHUB_SMTP_SENDER", "orders@electrohub.local"),
                starttls=_parse_bool(os.getenv("ELECTROHUB_SMTP_STARTTLS", "true")),
                timeout_s=float(os.getenv("ELECTROHUB_SMTP_TIMEOUT_S", "10")),
            )
        )

    def send(self, to: str, subject: str, text: str, html: str) -> None:
        if not to:
            raise NotificationError("No recipient address")

        msg = EmailMessage()
        msg["From"] = self._cfg.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(text)
        msg.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self._cfg.host, self._cfg.port, timeout=self._cfg.timeout_s) as smtp:
                if self._cfg.starttls:
                    smtp.starttls()
                if self._cfg.username:
                    smtp.login(self._cfg.username, self._cfg.password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP delivery to {to} failed: {e}") from e
