"""Bootstrap: settings -> notifier -> alert channel -> engine -> dispatcher."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dodemansknop.config import Settings
from dodemansknop.notifiers import Notifier, build_notifier
from dodemansknop.watchdog import AlertChannel, AlertDispatcher, WatchdogEngine

_log = logging.getLogger("dodemansknop.bootstrap")


@dataclass
class Service:
    settings: Settings
    notifier: Notifier
    alerts: AlertChannel
    engine: WatchdogEngine
    dispatcher: AlertDispatcher

    def start(self) -> None:
        self.dispatcher.start()
        self.engine.start()

    def stop(self) -> None:
        self.engine.stop()
        self.dispatcher.stop()

    def status(self) -> Dict[str, Any]:
        return {
            "engine": self.engine.status(),
            "alerts": self.alerts.status(),
            "dispatcher": self.dispatcher.status(),
        }


def build_service(settings: Settings, notifier: Optional[Notifier] = None) -> Service:
    """Wire the pipeline. Raises ConfigError for bad notifier settings."""
    if notifier is None:
        notifier = build_notifier(settings)
    alerts = AlertChannel(maxsize=settings.alert_queue_size)
    engine = WatchdogEngine(
        alerts,
        grace_period=settings.grace_period_seconds,
        ping_queue_size=settings.ping_queue_size,
        ping_put_timeout=settings.ping_put_timeout_seconds,
    )
    dispatcher = AlertDispatcher(alerts, notifier)
    _log.info(
        "service built: notifier=%s grace=%ss ping_queue=%d alert_queue=%d",
        type(notifier).__name__,
        settings.grace_period_seconds,
        settings.ping_queue_size,
        settings.alert_queue_size,
    )
    return Service(settings=settings, notifier=notifier, alerts=alerts, engine=engine, dispatcher=dispatcher)


def run(settings: Settings, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the ping API with uvicorn until killed."""
    import uvicorn

    from dodemansknop.api import create_app

    service = build_service(settings)
    app = create_app(service)
    uvicorn.run(
        app,
        host=host if host is not None else settings.host,
        port=port if port is not None else settings.port,
        log_level=settings.log_level.lower(),
    )
