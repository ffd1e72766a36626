"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from fintrack.logging_config import (
    PACKAGE_LOGGER,
    JSONFormatter,
    SessionBufferHandler,
    get_logger,
    session_log_path,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def _record(msg: str = "Test message", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO if exc_info is None else logging.ERROR,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """JSONFormatter emits one JSON document with the standard keys."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record("Error occurred", exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_includes_extra_fields():
    record = _record()
    record.transaction_id = 7
    record.category_id = 3

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"transaction_id": 7, "category_id": 3}


def test_setup_logging(config):
    """Setup creates the JSON log file and attaches three handlers."""
    logger = setup_logging(config)

    assert logger.name == "fintrack"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 3

    log_file = config.DATA_DIR / "logs" / "fintrack.log"
    assert log_file.exists()

    get_logger("api").warning("Request failed", extra={"path": "/api/accounts", "status": 500})

    entries = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["logger"] == "fintrack.api"
    assert entries[-1]["extra"] == {"path": "/api/accounts", "status": 500}


def test_session_buffer_is_flushed(config):
    setup_logging(config)
    get_logger(__name__).debug("debug detail")

    path = session_log_path()
    handler = next(
        h for h in logging.getLogger(PACKAGE_LOGGER).handlers if isinstance(h, SessionBufferHandler)
    )
    handler.flush_to_disk()

    assert path is not None and path.parent == config.DATA_DIR / "logs"
    assert "debug detail" in path.read_text(encoding="utf-8")


def test_get_logger():
    """get_logger namespaces under the package logger exactly once."""
    assert get_logger("module1").name == "fintrack.module1"
    assert get_logger("fintrack.api.client").name == "fintrack.api.client"
    assert get_logger("fintrack").name == "fintrack"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(config, dev_mode):
    """Console logging level adjusts based on dev mode."""
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if type(handler) is logging.StreamHandler
    )
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level
    assert logger.level == (logging.DEBUG if dev_mode else logging.INFO)
