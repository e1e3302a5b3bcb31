"""Tests for funcframe.log — execution log events and formatting."""

import json
import logging
import sys

import pytest

from funcframe.log import JSONFormatter, configure_logging, log_execution_finished, log_execution_started


@pytest.fixture
def restore_funcframe_logger():
    logger = logging.getLogger("funcframe")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    handlers, level, propagate = saved
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestExecutionEvents:
    def test_started(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="funcframe.execution"):
            log_execution_started()
        assert caplog.records[-1].getMessage() == "Execution started"

    def test_finished(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="funcframe.execution"):
            log_execution_finished(12, 404)
        record = caplog.records[-1]
        assert record.getMessage() == "Execution took 12 ms, finished with status code: 404"
        assert record.execution_ms == 12
        assert record.status_code == 404


class TestJSONFormatter:
    def test_fields(self) -> None:
        record = logging.makeLogRecord(
            {
                "name": "funcframe.execution",
                "levelno": logging.INFO,
                "levelname": "INFO",
                "msg": "Execution took %d ms",
                "args": (5,),
                "execution_ms": 5,
            }
        )
        entry = json.loads(JSONFormatter().format(record))
        assert entry["severity"] == "INFO"
        assert entry["message"] == "Execution took 5 ms"
        assert entry["logger"] == "funcframe.execution"
        assert entry["execution_ms"] == 5
        assert "time" in entry

    def test_exception_included(self) -> None:
        try:
            raise ValueError("broken")
        except ValueError:
            record = logging.makeLogRecord(
                {"levelno": logging.ERROR, "levelname": "ERROR", "msg": "failed", "exc_info": sys.exc_info()}
            )
        entry = json.loads(JSONFormatter().format(record))
        assert entry["severity"] == "ERROR"
        assert "ValueError: broken" in entry["exception"]


class TestConfigureLogging:
    def test_json_handler(self, restore_funcframe_logger) -> None:
        configure_logging("debug", "json")
        logger = restore_funcframe_logger
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        (handler,) = logger.handlers
        assert isinstance(handler.formatter, JSONFormatter)

    def test_text_handler(self, restore_funcframe_logger) -> None:
        configure_logging("warning", "text")
        (handler,) = restore_funcframe_logger.handlers
        assert not isinstance(handler.formatter, JSONFormatter)
        assert restore_funcframe_logger.level == logging.WARNING
