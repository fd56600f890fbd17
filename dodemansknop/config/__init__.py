"""Configuration: settings models and loader."""
from __future__ import annotations

from .settings import ConfigError, Settings, WebhookSettings, load_settings

__all__ = ["ConfigError", "Settings", "WebhookSettings", "load_settings"]
