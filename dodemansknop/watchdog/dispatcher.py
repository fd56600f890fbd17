"""Alert dispatcher: serial notifier calls, failures logged and never fatal."""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from dodemansknop.notifiers import Notifier

from .channel import AlertChannel

_log = logging.getLogger("dodemansknop.dispatcher")


class AlertDispatcher:
    """Consumes alert events one at a time (FIFO); one delivery attempt each, no retry."""

    def __init__(self, alerts: AlertChannel, notifier: Notifier, poll_seconds: float = 0.5) -> None:
        self.alerts = alerts
        self.notifier = notifier
        self.poll_seconds = poll_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._delivered = 0
        self._failed = 0
        self._last_error: Optional[str] = None

    def start(self) -> "AlertDispatcher":
        if self._thread is not None and self._thread.is_alive():
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="alert-dispatcher", daemon=True)
        self._thread.start()
        _log.info("alert dispatcher started (%s)", type(self.notifier).__name__)
        return self

    def stop(self, timeout: float = 5.0) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout)
        self._thread = None

    def dispatch(self, key: str) -> bool:
        try:
            self.notifier.notify_failure(key)
        except Exception as e:
            self._failed += 1
            self._last_error = str(e)
            _log.warning("error while notifying about failure of %s: %s", key, e)
            return False
        self._delivered += 1
        _log.info("failure notified for %s", key)
        return True

    def _loop(self) -> None:
        while not self._stop.is_set():
            key = self.alerts.get(timeout=self.poll_seconds)
            if key is None:
                continue
            self.dispatch(key)

    def status(self) -> Dict[str, Any]:
        return {
            "running": self._thread is not None and self._thread.is_alive(),
            "notifier": type(self.notifier).__name__,
            "delivered": self._delivered,
            "failed": self._failed,
            "last_error": self._last_error,
        }
