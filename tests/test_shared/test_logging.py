"""Tests for structured JSON logging."""
from __future__ import annotations

import json
import logging

from src.shared.logging import JSONFormatter, setup_logging, trace_id_var


def _record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="service-graph.state",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        entry = json.loads(JSONFormatter("service-graph").format(_record()))

        assert entry["level"] == "INFO"
        assert entry["service_name"] == "service-graph"
        assert entry["logger"] == "service-graph.state"
        assert entry["message"] == "hello"
        assert "environment" not in entry

    def test_environment_extra(self):
        entry = json.loads(JSONFormatter().format(_record(environment="staging")))
        assert entry["environment"] == "staging"

    def test_trace_id_from_context(self):
        token = trace_id_var.set("abc")
        try:
            entry = json.loads(JSONFormatter().format(_record()))
        finally:
            trace_id_var.reset(token)
        assert entry["trace_id"] == "abc"


class TestSetupLogging:
    def test_level_and_single_handler(self):
        logger = setup_logging("service-graph-test", "debug")
        setup_logging("service-graph-test", "debug")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_unknown_level_falls_back_to_info(self):
        logger = setup_logging("service-graph-test-2", "chatty")
        assert logger.level == logging.INFO
