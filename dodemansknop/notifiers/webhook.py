"""Webhook notifier: one HTTP request per missed deadline (requests)."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

import requests

from .base import NotifierError

_log = logging.getLogger("dodemansknop.notifiers.webhook")

_TIMEOUT_SEC = 10.0
_BODYLESS_METHODS = ("GET", "HEAD")


class WebhookNotifier:
    """
    Sends the failed key to a remote endpoint.

    The URL may contain a `{key}` placeholder (URL-quoted). The key also goes
    in a JSON body, or as a `key` query parameter for GET/HEAD.
    """

    def __init__(
        self,
        url: str,
        method: str = "POST",
        headers: Optional[Sequence[Tuple[str, str]]] = None,
        timeout_sec: float = _TIMEOUT_SEC,
        check_status: bool = True,
        session: Optional[Any] = None,
    ) -> None:
        self.url = url
        self.method = (method or "POST").strip().upper()
        self.headers: List[Tuple[str, str]] = [(str(n), str(v)) for n, v in (headers or [])]
        self.timeout_sec = float(timeout_sec)
        self.check_status = check_status
        self._session = session or requests.Session()

    def _render_url(self, key: str) -> str:
        return self.url.replace("{key}", quote(key, safe=""))

    def _request_kwargs(self, key: str) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "headers": dict(self.headers),
            "timeout": self.timeout_sec,
        }
        if self.method in _BODYLESS_METHODS:
            kwargs["params"] = {"key": key}
        else:
            kwargs["json"] = {
                "key": key,
                "event": "missed_ping",
                "ts": datetime.now(timezone.utc).isoformat(),
            }
        return kwargs

    def notify_failure(self, key: str) -> None:
        url = self._render_url(key)
        try:
            r = self._session.request(self.method, url, **self._request_kwargs(key))
        except requests.RequestException as e:
            raise NotifierError(f"{self.method} {url} failed: {e}") from e
        _log.debug("webhook %s %s -> HTTP %s", self.method, url, r.status_code)
        if self.check_status and not (200 <= r.status_code < 300):
            raise NotifierError(f"{self.method} {url} returned HTTP {r.status_code}")
