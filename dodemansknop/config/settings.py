"""Settings: JSON/YAML file + .env + DMS_* environment overrides, validated with pydantic."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

_log = logging.getLogger("dodemansknop.config")

DEFAULT_CONFIG_PATH = "dodemansknop.json"

# understood by both logging and uvicorn
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# env var -> (section, field); section None = top level
_ENV_OVERRIDES: Dict[str, Tuple[Optional[str], str]] = {
    "DMS_NOTIFIER_TYPE": (None, "notifier_type"),
    "DMS_GRACE_PERIOD_SECONDS": (None, "grace_period_seconds"),
    "DMS_PING_QUEUE_SIZE": (None, "ping_queue_size"),
    "DMS_PING_PUT_TIMEOUT_SECONDS": (None, "ping_put_timeout_seconds"),
    "DMS_ALERT_QUEUE_SIZE": (None, "alert_queue_size"),
    "DMS_HOST": (None, "host"),
    "DMS_PORT": (None, "port"),
    "DMS_LOG_LEVEL": (None, "log_level"),
    "DMS_WEBHOOK_URL": ("webhook", "url"),
    "DMS_WEBHOOK_METHOD": ("webhook", "method"),
}


class ConfigError(Exception):
    """Invalid or missing configuration. Fatal at startup."""


class WebhookSettings(BaseModel):
    url: str = Field(..., min_length=1)
    method: str = Field(default="POST", min_length=1)
    headers: Optional[List[Tuple[str, str]]] = None
    timeout_seconds: float = Field(default=10.0, gt=0)
    check_status: bool = True


class Settings(BaseModel):
    notifier_type: str = "noop"  # webhook | noop
    webhook: Optional[WebhookSettings] = None
    grace_period_seconds: float = Field(default=5.0, gt=0)
    ping_queue_size: int = Field(default=32, ge=1)
    ping_put_timeout_seconds: float = Field(default=0.5, ge=0)
    alert_queue_size: int = Field(default=1024, ge=0)  # 0 = unbounded
    host: str = "127.0.0.1"
    port: int = Field(default=3030, ge=0, le=65535)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


def _read_file(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            import yaml

            data = yaml.safe_load(raw) or {}
        else:
            data = json.loads(raw) if raw.strip() else {}
    except Exception as e:
        raise ConfigError(f"cannot parse config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    return data


def _apply_env(data: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(data)
    for name, (section, field) in _ENV_OVERRIDES.items():
        value = (os.getenv(name) or "").strip()
        if not value:
            continue
        if section is None:
            out[field] = value
            continue
        sub = dict(out.get(section) or {})
        sub[field] = value
        out[section] = sub
    return out


def _load_dotenv() -> None:
    from dotenv import find_dotenv, load_dotenv

    path = find_dotenv(usecwd=True)
    if path:
        load_dotenv(path, override=False)


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings once at startup.

    Path order: explicit argument, DMS_CONFIG, then dodemansknop.json in the
    working directory. A missing explicit path is an error; a missing default
    file just means defaults + environment.
    """
    _load_dotenv()
    explicit = path or (os.getenv("DMS_CONFIG") or "").strip() or None
    cfg_path = Path(explicit or DEFAULT_CONFIG_PATH)

    data: Dict[str, Any] = {}
    if cfg_path.is_file():
        data = _read_file(cfg_path)
        _log.debug("config file loaded: %s", cfg_path)
    elif explicit:
        raise ConfigError(f"config file not found: {cfg_path}")

    try:
        return Settings.model_validate(_apply_env(data))
    except ValidationError as e:
        raise ConfigError(f"invalid settings: {e}") from e
