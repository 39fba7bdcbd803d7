"""Logging configuration for hubtools.

stdout carries the MCP stdio transport, so console logging always goes to
stderr. An optional log file captures everything at DEBUG.

Usage:
    from hubtools.logging import configure_logging
    configure_logging(level="INFO", log_file="hubtools.log")

Priority for level resolution (highest to lowest):
    1. HUBTOOLS_LOG_LEVEL env var (any level: DEBUG, INFO, WARNING, etc.)
    2. Explicit `level` parameter (from config or --log-level)
    3. WARNING (default)
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import TextIO

# Format includes module path for tracing issues
_DEBUG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"
_DEFAULT_FORMAT = "%(name)s: %(message)s"

# Noisy libraries we want to quiet even in debug mode
_NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "asyncio",
    "anyio",
    "mcp.server.lowlevel.server",
)


def configure_logging(
    *,
    level: int | str | None = None,
    log_file: str | Path | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure the root logger.

    Call once from the CLI entrypoint before the server starts.

    Args:
        level: Console log level (int or string like "DEBUG", "INFO")
        log_file: Also append DEBUG-level logs to this file
        stream: Console stream (default: stderr)
    """
    resolved_level: int
    if env_level := os.environ.get("HUBTOOLS_LOG_LEVEL"):
        resolved_level = _parse_level(env_level)
    elif level is not None:
        resolved_level = _parse_level(level)
    else:
        resolved_level = logging.WARNING

    console_format = _DEBUG_FORMAT if resolved_level <= logging.DEBUG else _DEFAULT_FORMAT

    root_logger = logging.getLogger()
    # With a log file, root must let DEBUG through so the file handler sees it
    root_logger.setLevel(logging.DEBUG if log_file else resolved_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(logging.Formatter(console_format))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_DEBUG_FORMAT))
        root_logger.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s, log_file=%s",
        logging.getLevelName(resolved_level),
        log_file,
    )


def _parse_level(level: int | str) -> int:
    """Parse log level from int or string."""
    if isinstance(level, int):
        return level
    numeric = getattr(logging, level.upper(), None)
    if isinstance(numeric, int):
        return numeric
    try:
        return int(level)
    except ValueError:
        return logging.WARNING
