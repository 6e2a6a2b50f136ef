"""Tests for the loguru setup and the stdlib bridge used by slack-sdk."""

from __future__ import annotations

import logging

import pytest
from loguru import logger

from koko.logging import InterceptHandler, bridge_logger, setup_logging


@pytest.fixture
def captured():
    records: list = []
    sink_id = logger.add(records.append, level="DEBUG", format="{message}")
    yield records
    logger.remove(sink_id)


def test_bridge_logger_forwards_warnings(captured):
    std_logger = bridge_logger("koko.test.bridge", "api")
    std_logger.warning("rate limited: %s", "chat.postMessage")

    assert len(captured) == 1
    record = captured[0].record
    assert record["message"] == "rate limited: chat.postMessage"
    assert record["level"].name == "WARNING"
    assert record["extra"]["component"] == "api"


def test_bridge_logger_drops_debug_unless_enabled(captured):
    bridge_logger("koko.test.quiet", "socketmode").debug("frame received")
    assert captured == []

    bridge_logger("koko.test.debug", "socketmode", debug=True).info("frame received")
    assert len(captured) == 1
    assert captured[0].record["level"].name == "DEBUG"


def test_bridge_logger_does_not_propagate():
    std_logger = bridge_logger("koko.test.propagate", "api")
    assert std_logger.propagate is False
    assert len(std_logger.handlers) == 1
    assert isinstance(std_logger.handlers[0], InterceptHandler)


def test_intercept_handler_keeps_error_level(captured):
    handler = InterceptHandler("api")
    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed %d", (3,), None)
    handler.emit(record)
    assert captured[0].record["level"].name == "ERROR"
    assert captured[0].record["message"] == "failed 3"


def test_setup_logging_writes_file(tmp_path):
    setup_logging(verbose=True, log_dir=tmp_path)
    logger.bind(component="test").info("file sink check")
    logger.complete()
    logger.remove()

    content = (tmp_path / "koko.log").read_text(encoding="utf-8")
    assert "file sink check" in content
    assert "| test |" in content
