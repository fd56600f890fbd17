"""Watchdog engine: one expiry timer per key, renewed by pings, alert once per miss.

The timer registry is owned by a single serial thread. Timer callbacks never
touch it; they post an Expired(key, epoch) message to the engine inbox and the
serial loop decides whether that epoch is still current before alerting.
"""
from __future__ import annotations

import itertools
import logging
import queue
import threading
from typing import Any, Callable, Dict, Optional

from .channel import AlertChannel
from .models import Expired, Ping, Stop, TimerHandle

_log = logging.getLogger("dodemansknop.engine")

TimerFactory = Callable[..., Any]


class WatchdogEngine:
    def __init__(
        self,
        alerts: AlertChannel,
        grace_period: float = 5.0,
        ping_queue_size: int = 32,
        ping_put_timeout: float = 0.5,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        if grace_period <= 0:
            raise ValueError("grace_period must be > 0")
        self.alerts = alerts
        self.grace_period = float(grace_period)
        self.ping_queue_size = max(1, int(ping_queue_size))
        self.ping_put_timeout = max(0.0, float(ping_put_timeout))
        self._timer_factory = timer_factory

        # pings hold a slot until the loop dequeues them; expiries bypass the bound
        self._inbox: "queue.Queue[Any]" = queue.Queue()
        self._ping_slots = threading.BoundedSemaphore(self.ping_queue_size)
        self._timers: Dict[str, TimerHandle] = {}
        self._epochs = itertools.count(1)
        self._thread: Optional[threading.Thread] = None
        self._running = False

        self._stats_lock = threading.Lock()
        self._pings_accepted = 0
        self._pings_dropped = 0
        self._alerts_emitted = 0
        self._stale_expiries = 0
        self._tracked = 0

    # --- public ---

    def start(self) -> "WatchdogEngine":
        if self._thread is not None and self._thread.is_alive():
            return self
        self._running = True
        self._thread = threading.Thread(target=self._loop, name="watchdog-engine", daemon=True)
        self._thread.start()
        _log.info("watchdog engine started (grace=%ss, ping queue=%d)", self.grace_period, self.ping_queue_size)
        return self

    def stop(self, timeout: float = 5.0) -> None:
        if self._thread is None:
            return
        self._running = False
        self._inbox.put(Stop())
        self._thread.join(timeout)
        self._thread = None
        _log.info("watchdog engine stopped")

    def register_ping(self, key: str) -> bool:
        """
        Record a heartbeat for key. Returns False (and logs) when the ping is
        dropped because the ping queue stayed full or the engine is not running.
        """
        if not key:
            raise ValueError("key must be a non-empty string")
        if not self._running:
            _log.warning("engine not running; dropping ping for %s", key)
            self._count_drop()
            return False
        if not self._ping_slots.acquire(timeout=self.ping_put_timeout):
            _log.warning("ping queue full; dropping ping for %s", key)
            self._count_drop()
            return False
        self._inbox.put(Ping(key))
        with self._stats_lock:
            self._pings_accepted += 1
        return True

    def _count_drop(self) -> None:
        with self._stats_lock:
            self._pings_dropped += 1

    def status(self) -> Dict[str, Any]:
        return {
            "running": self._running,
            "grace_period_seconds": self.grace_period,
            "tracked_keys": self._tracked,
            "pings_accepted": self._pings_accepted,
            "pings_dropped": self._pings_dropped,
            "alerts_emitted": self._alerts_emitted,
            "stale_expiries": self._stale_expiries,
        }

    # --- serial loop (sole owner of self._timers) ---

    def _loop(self) -> None:
        while True:
            msg = self._inbox.get()
            if isinstance(msg, Stop):
                break
            try:
                if isinstance(msg, Ping):
                    self._ping_slots.release()
                    self._arm(msg.key)
                elif isinstance(msg, Expired):
                    self._expire(msg.key, msg.epoch)
            except Exception as e:
                _log.exception("engine loop error on %r: %s", msg, e)
        self._cancel_all()

    def _arm(self, key: str) -> None:
        _log.debug("received ping for %s", key)
        prev = self._timers.pop(key, None)
        if prev is not None:
            prev.cancel()
        epoch = next(self._epochs)
        timer = self._timer_factory(self.grace_period, self._on_timer, args=(key, epoch))
        timer.daemon = True
        self._timers[key] = TimerHandle(key=key, epoch=epoch, timer=timer)
        self._tracked = len(self._timers)
        timer.start()

    def _expire(self, key: str, epoch: int) -> None:
        current = self._timers.get(key)
        if current is None or current.epoch != epoch:
            self._stale_expiries += 1
            _log.debug("ignoring superseded expiry for %s (epoch %d)", key, epoch)
            return
        del self._timers[key]
        self._tracked = len(self._timers)
        self.alerts.publish(key)
        self._alerts_emitted += 1
        _log.debug("alert scheduled for %s", key)

    def _cancel_all(self) -> None:
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        self._tracked = 0

    # --- timer threads ---

    def _on_timer(self, key: str, epoch: int) -> None:
        _log.info("missed ping for %s; scheduling alert", key)
        self._inbox.put(Expired(key, epoch))
