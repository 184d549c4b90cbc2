from __future__ import annotations

import os

from services.storefront.app.services.notifier_base import Notifier
from services.storefront.app.services.notifier_mock import MockNotifier


def get_notifier() -> Notifier:
    """Select a notifier based on env vars.

    Defaults to the mock notifier so tests and local dev never send real email unless
    explicitly configured otherwise.
    """

    mode = os.getenv("ELECTROHUB_NOTIFIER", "mock").strip().lower()

    if mode == "mock":
        return MockNotifier()

    if mode == "smtp":
        from services.storefront.app.services.notifier_smtp import SmtpNotifier

        return SmtpNotifier.from_env()

    raise ValueError(f"Unknown ELECTROHUB_NOTIFIER={mode!r}. Expected mock or smtp.")
