"""dodemansknop: dead man's switch watchdog. Alerts when a keyed heartbeat stops."""
from __future__ import annotations

__version__ = "0.1.0"
