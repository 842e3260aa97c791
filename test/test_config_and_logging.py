import json
import logging
from pathlib import Path

import pytest

from stockjournal.config import GatewaySettings, get_app_paths, get_gateway_settings
from stockjournal.logging_config import CHANNEL_FILES, JsonFormatter, setup_logging
from stockjournal.repositories import http_gateway
from stockjournal.services import submission_service


def test_gateway_settings_defaults():
    settings = get_gateway_settings({})
    assert settings == GatewaySettings()
    assert settings.search_debounce_seconds == 0.5


def test_gateway_settings_from_environment():
    settings = get_gateway_settings({
        "STOCKJOURNAL_API_URL": " https://erp.example.com/api/v1 ",
        "STOCKJOURNAL_API_TOKEN": "tok",
        "STOCKJOURNAL_TENANT": "acme",
        "STOCKJOURNAL_TIMEOUT": "12",
        "STOCKJOURNAL_SEARCH_DEBOUNCE_MS": "250",
    })

    assert settings.base_url == "https://erp.example.com/api/v1"
    assert settings.token == "tok"
    assert settings.tenant_slug == "acme"
    assert settings.timeout_seconds == 12.0
    assert settings.search_debounce_seconds == 0.25


def test_gateway_settings_reject_bad_timeout():
    with pytest.raises(ValueError, match="STOCKJOURNAL_TIMEOUT"):
        get_gateway_settings({"STOCKJOURNAL_TIMEOUT": "soon"})


def test_json_formatter_emits_one_object_per_record():
    record = logging.LogRecord("stockjournal.submissions", logging.INFO, __file__, 1, "entry_submitted entry_id=%s", (7,), None)
    line = JsonFormatter().format(record)

    payload = json.loads(line)
    assert payload["logger"] == "stockjournal.submissions"
    assert payload["thread"] == record.threadName
    assert payload["message"] == "entry_submitted entry_id=7"


def test_setup_logging_creates_log_files(tmp_path: Path, monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    sub = logging.getLogger("stockjournal.submissions")
    gw = logging.getLogger("stockjournal.gateway")
    monkeypatch.setattr(sub, "handlers", [])
    monkeypatch.setattr(gw, "handlers", [])

    setup_logging(tmp_path / "logs")
    logging.getLogger("stockjournal.submissions").info("entry_submitted entry_id=%s", 1)
    for h in root.handlers + sub.handlers + gw.handlers:
        h.flush()
        h.close()

    assert (tmp_path / "logs" / "app.log").exists()
    assert "entry_submitted" in (tmp_path / "logs" / "submissions.log").read_text(encoding="utf-8")


def test_bootstrap_wires_logging_and_container(tmp_path: Path, monkeypatch):
    from stockjournal import main
    from stockjournal.config import AppPaths

    calls = []
    monkeypatch.setattr(main, "get_app_paths", lambda: AppPaths(base_dir=tmp_path, logs_dir=tmp_path / "logs"))
    monkeypatch.setattr(main, "setup_logging", lambda logs_dir, level: calls.append((logs_dir, level)))
    monkeypatch.setenv("STOCKJOURNAL_API_URL", "https://erp.example.com/api/v1")
    monkeypatch.setenv("STOCKJOURNAL_TENANT", "acme")

    container = main.bootstrap(logging.DEBUG)

    assert calls == [(tmp_path / "logs", logging.DEBUG)]
    assert container.settings.tenant_slug == "acme"
    assert container.gateway._url("/7") == "https://erp.example.com/api/v1/tenant/acme/inventory/stock-journal/7"


def test_gateway_settings_reject_non_http_url():
    with pytest.raises(ValueError, match="STOCKJOURNAL_API_URL"):
        get_gateway_settings({"STOCKJOURNAL_API_URL": "erp.example.com/api"})


def test_app_paths_honour_home_override(tmp_path: Path):
    paths = get_app_paths(env={"STOCKJOURNAL_HOME": str(tmp_path / "sj")})

    assert paths.base_dir == tmp_path / "sj"
    assert paths.logs_dir == tmp_path / "sj" / "logs"
    assert paths.logs_dir.is_dir()


def test_channel_files_follow_service_logger_names():
    assert CHANNEL_FILES == {
        submission_service.LOGGER_NAME: "submissions.log",
        http_gateway.LOGGER_NAME: "gateway.log",
    }
    assert submission_service.log.name == submission_service.LOGGER_NAME
    assert http_gateway.log.name == http_gateway.LOGGER_NAME


def test_setup_logging_accepts_extra_channels(tmp_path: Path, monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    audit = logging.getLogger("stockjournal.test_audit")
    monkeypatch.setattr(audit, "handlers", [])

    setup_logging(tmp_path, level=logging.DEBUG, channels={"stockjournal.test_audit": "audit.log"})
    audit.debug("line_added local_id=%s", "line-1")
    for h in root.handlers + audit.handlers:
        h.flush()
        h.close()

    assert audit.level == logging.DEBUG
    # handler threshold stays at INFO
    assert (tmp_path / "audit.log").read_text(encoding="utf-8") == ""
