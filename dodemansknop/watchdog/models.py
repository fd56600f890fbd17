"""Watchdog models: timer handle and engine inbox messages."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class TimerHandle:
    """One scheduled expiry for one key. epoch identifies it uniquely."""
    key: str
    epoch: int
    timer: Any  # threading.Timer-like: start(), cancel()

    def cancel(self) -> None:
        self.timer.cancel()


@dataclass(frozen=True)
class Ping:
    key: str


@dataclass(frozen=True)
class Expired:
    key: str
    epoch: int


@dataclass(frozen=True)
class Stop:
    pass
