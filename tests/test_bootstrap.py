from __future__ import annotations

import json

import pytest


def test_build_service_wires_configured_sizes():
    from dodemansknop.bootstrap import build_service
    from dodemansknop.config import Settings
    from dodemansknop.notifiers import NoOpNotifier

    s = Settings(grace_period_seconds=2.0, ping_queue_size=8, alert_queue_size=16)
    service = build_service(s)
    assert isinstance(service.notifier, NoOpNotifier)
    assert service.engine.grace_period == 2.0
    assert service.engine.ping_queue_size == 8
    assert service.alerts.maxsize == 16
    assert service.dispatcher.alerts is service.alerts
    assert service.engine.alerts is service.alerts


def test_build_service_rejects_bad_notifier_config():
    from dodemansknop.bootstrap import build_service
    from dodemansknop.config import ConfigError, Settings

    with pytest.raises(ConfigError):
        build_service(Settings(notifier_type="webhook"))


def test_service_start_and_stop():
    from dodemansknop.bootstrap import build_service
    from dodemansknop.config import Settings

    service = build_service(Settings())
    service.start()
    try:
        assert service.engine.register_ping("svc") is True
        assert service.status()["engine"]["running"] is True
    finally:
        service.stop()
    assert service.status()["engine"]["running"] is False


def test_main_exits_2_on_missing_config(tmp_path):
    from dodemansknop.__main__ import main

    assert main(["--config", str(tmp_path / "missing.json")]) == 2


def test_main_exits_2_on_unknown_notifier(tmp_path, monkeypatch):
    from dodemansknop.__main__ import main

    p = tmp_path / "dms.json"
    p.write_text(json.dumps({"notifier_type": "carrier-pigeon"}), encoding="utf-8")
    monkeypatch.delenv("DMS_NOTIFIER_TYPE", raising=False)
    assert main(["--config", str(p)]) == 2


def test_main_runs_server_with_cli_overrides(tmp_path, monkeypatch):
    from dodemansknop import __main__ as entry

    seen = {}

    def fake_run(settings, host=None, port=None):
        seen.update(settings=settings, host=host, port=port)

    monkeypatch.setattr(entry, "run", fake_run)
    monkeypatch.chdir(tmp_path)
    assert entry.main(["--host", "0.0.0.0", "--port", "8081"]) == 0
    assert seen["host"] == "0.0.0.0"
    assert seen["port"] == 8081


def test_main_exits_2_on_unknown_log_level(tmp_path, monkeypatch):
    from dodemansknop import __main__ as entry

    p = tmp_path / "dms.json"
    p.write_text(json.dumps({"log_level": "verbose"}), encoding="utf-8")
    monkeypatch.delenv("DMS_LOG_LEVEL", raising=False)
    monkeypatch.setattr(entry, "run", lambda settings, host=None, port=None: None)
    assert entry.main(["--config", str(p)]) == 2


def test_main_passes_explicit_port_zero(tmp_path, monkeypatch):
    from dodemansknop import __main__ as entry

    seen = {}
    monkeypatch.setattr(entry, "run", lambda settings, host=None, port=None: seen.update(port=port))
    monkeypatch.chdir(tmp_path)
    assert entry.main(["--port", "0"]) == 0
    assert seen["port"] == 0


def test_run_keeps_explicit_port_zero(monkeypatch):
    import uvicorn

    from dodemansknop.bootstrap import run
    from dodemansknop.config import Settings

    seen = {}
    monkeypatch.setattr(uvicorn, "run", lambda app, **kw: seen.update(kw))
    run(Settings(port=3030, log_level="debug"), host="", port=0)
    assert seen["port"] == 0
    assert seen["host"] == ""
    assert seen["log_level"] == "debug"
