"""Alert channel: FIFO of missed keys, bounded with drop-oldest overflow."""
from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Dict, Optional

_log = logging.getLogger("dodemansknop.channel")


class AlertChannel:
    """
    Engine -> dispatcher queue. publish never blocks: when full, the oldest
    pending alert is dropped and counted. maxsize=0 means unbounded.
    """

    def __init__(self, maxsize: int = 1024) -> None:
        self.maxsize = max(0, int(maxsize))
        self._q: "queue.Queue[str]" = queue.Queue(maxsize=self.maxsize)
        self._lock = threading.Lock()
        self._published = 0
        self._dropped = 0

    def publish(self, key: str) -> None:
        with self._lock:
            while True:
                try:
                    self._q.put_nowait(key)
                    self._published += 1
                    return
                except queue.Full:
                    pass
                try:
                    oldest = self._q.get_nowait()
                except queue.Empty:
                    continue
                self._dropped += 1
                _log.warning("alert channel full (%d); dropped oldest alert for %s", self.maxsize, oldest)

    def get(self, timeout: Optional[float] = None) -> Optional[str]:
        """Next key in FIFO order, or None after timeout."""
        try:
            return self._q.get(timeout=timeout)
        except queue.Empty:
            return None

    def qsize(self) -> int:
        return self._q.qsize()

    def status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "maxsize": self.maxsize,
                "pending": self._q.qsize(),
                "published": self._published,
                "dropped": self._dropped,
            }
