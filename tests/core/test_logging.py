"""
Tests for crudkit.core.logging.

Tests verify:
- JSON output carries ECS keys, service name and logger name
- Bound context (LogContext) appears in events and is removed afterwards
- DEBUG events are suppressed at INFO level
"""

from __future__ import annotations

import json

import pytest
import structlog

from crudkit.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    clear_context()
    structlog.reset_defaults()


def _records(capsys) -> list[dict]:
    out = capsys.readouterr().out
    return [json.loads(line) for line in out.splitlines() if line.startswith("{")]


class TestConfigureLogging:
    def test_json_fields(self, capsys):
        configure_logging(level="INFO", json_format=True, service="contacts-api")
        get_logger("tests.logging").info("contact_created", rows=1)

        (record,) = _records(capsys)
        assert record["event"] == "contact_created"
        assert record["rows"] == 1
        assert record["logger_name"] == "tests.logging"
        assert record["service.name"] == "contacts-api"
        assert record["log.level"] == "info"
        assert "@timestamp" in record

    def test_debug_suppressed_at_info(self, capsys):
        configure_logging(level="INFO", json_format=True)
        log = get_logger("tests.logging")
        log.debug("hidden")
        log.info("shown")
        assert [r["event"] for r in _records(capsys)] == ["shown"]

    def test_module_logger_follows_later_configuration(self, capsys):
        log = get_logger("tests.early")
        configure_logging(level="INFO", json_format=True, service="late")
        log.info("after_configure")
        (record,) = _records(capsys)
        assert record["service.name"] == "late"


class TestContext:
    def test_log_context_scoped(self, capsys):
        configure_logging(level="INFO", json_format=True)
        log = get_logger("tests.logging")
        with LogContext(request_id="req-1"):
            log.info("inside")
        log.info("outside")

        inside, outside = _records(capsys)
        assert inside["request_id"] == "req-1"
        assert "request_id" not in outside

    def test_bind_and_unbind(self, capsys):
        configure_logging(level="INFO", json_format=True)
        log = get_logger("tests.logging")
        bind_context(entity="contacts")
        log.info("bound")
        unbind_context("entity")
        log.info("unbound")

        bound, unbound = _records(capsys)
        assert bound["entity"] == "contacts"
        assert "entity" not in unbound
