"""Tests for logging configuration."""

import io
import logging
from pathlib import Path

import pytest

from hubtools.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger(monkeypatch):
    monkeypatch.delenv("HUBTOOLS_LOG_LEVEL", raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_default_level_is_warning():
    stream = io.StringIO()
    configure_logging(stream=stream)

    logging.getLogger("hubtools.test").info("hidden")
    logging.getLogger("hubtools.test").warning("shown")

    assert "hidden" not in stream.getvalue()
    assert "hubtools.test: shown" in stream.getvalue()


def test_explicit_level():
    stream = io.StringIO()
    configure_logging(level="info", stream=stream)
    logging.getLogger("hubtools.test").info("visible")
    assert "visible" in stream.getvalue()


def test_env_level_wins(monkeypatch):
    monkeypatch.setenv("HUBTOOLS_LOG_LEVEL", "ERROR")
    stream = io.StringIO()
    configure_logging(level="DEBUG", stream=stream)
    logging.getLogger("hubtools.test").warning("hidden")
    assert stream.getvalue() == ""


def test_log_file_captures_debug(tmp_path: Path):
    log_file = tmp_path / "hubtools.log"
    stream = io.StringIO()
    configure_logging(level="WARNING", log_file=log_file, stream=stream)

    logging.getLogger("hubtools.test").debug("debug detail")

    assert "debug detail" not in stream.getvalue()
    assert "debug detail" in log_file.read_text()


def test_noisy_loggers_quieted():
    configure_logging(level="DEBUG", stream=io.StringIO())
    assert logging.getLogger("httpx").level == logging.WARNING
