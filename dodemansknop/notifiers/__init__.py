"""Notifiers: pluggable sinks for missed-deadline alerts."""
from __future__ import annotations

from typing import TYPE_CHECKING

from .base import MemoryNotifier, NoOpNotifier, Notifier, NotifierError
from .webhook import WebhookNotifier

if TYPE_CHECKING:
    from dodemansknop.config import Settings


def build_notifier(settings: "Settings") -> Notifier:
    """Build the configured notifier. Raises ConfigError; only called at startup."""
    from dodemansknop.config import ConfigError

    kind = (settings.notifier_type or "").strip().lower()
    if kind == "webhook":
        wh = settings.webhook
        if wh is None:
            raise ConfigError("no webhook settings found")
        return WebhookNotifier(
            url=wh.url,
            method=wh.method,
            headers=wh.headers or [],
            timeout_sec=wh.timeout_seconds,
            check_status=wh.check_status,
        )
    if kind == "noop":
        return NoOpNotifier()
    raise ConfigError(f"unsupported notifier: {settings.notifier_type}")


__all__ = [
    "MemoryNotifier",
    "NoOpNotifier",
    "Notifier",
    "NotifierError",
    "WebhookNotifier",
    "build_notifier",
]
