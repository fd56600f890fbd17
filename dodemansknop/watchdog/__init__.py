"""Watchdog: per-key expiry timers, alert channel, alert dispatcher."""
from __future__ import annotations

from .channel import AlertChannel
from .dispatcher import AlertDispatcher
from .engine import WatchdogEngine
from .models import TimerHandle

__all__ = ["AlertChannel", "AlertDispatcher", "TimerHandle", "WatchdogEngine"]
