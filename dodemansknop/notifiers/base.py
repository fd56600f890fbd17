"""Notifier capability: protocol, error type, no-op and in-memory sinks."""
from __future__ import annotations

import logging
import threading
from typing import List, Protocol, runtime_checkable

_log = logging.getLogger("dodemansknop.notifiers")


class NotifierError(Exception):
    """Delivery of a failure notification did not succeed."""


@runtime_checkable
class Notifier(Protocol):
    """
    Sink invoked with the key of a missed deadline.

    notify_failure raises on failure; the dispatcher catches and logs it.
    """

    def notify_failure(self, key: str) -> None: ...


class NoOpNotifier:
    """Always succeeds, performs no I/O."""

    def notify_failure(self, key: str) -> None:
        _log.debug("noop notifier: %s", key)


class MemoryNotifier:
    """Records notified keys; thread-safe."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keys: List[str] = []

    def notify_failure(self, key: str) -> None:
        with self._lock:
            self._keys.append(key)

    @property
    def keys(self) -> List[str]:
        with self._lock:
            return list(self._keys)

    def count(self, key: str) -> int:
        with self._lock:
            return self._keys.count(key)
