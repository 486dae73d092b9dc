# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for aocbench.

Everything aocbench says about a run goes through here: which days were
found, which ones failed to build, how each benchmark iteration went.
Library use logs to stdout; the CLI moves console logging to stderr so that
stdout carries only the report.

How this works:
  - Python's standard `logging` module does the routing, but every record is
    rendered by JsonFormatter as a single JSON line.
  - `get_logger` is the factory every module calls once at import time.
  - `set_log_level` retunes every aocbench logger after the CLI has parsed
    --log-level, since module loggers are created before that happens.
  - `set_log_stream` moves console output to another stream the same way.

A line looks like:
  {"ts": "2026-...", "level": "INFO", "module": "aocbench.tally.stages.compiling", "msg": "Day compiled", "day": 3}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO

_ROOT_NAME = "aocbench"

# Stream for new handlers; None means whatever sys.stdout is at the time.
_log_stream: Optional[TextIO] = None

# LogRecord attributes that are never copied into the JSON payload.
_STANDARD_ATTRS = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "relativeCreated",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "pathname",
    "filename",
    "module",
    "levelno",
    "levelname",
    "processName",
    "process",
    "threadName",
    "thread",
    "message",
    "msecs",
    "taskName",
})


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts:     ISO 8601 UTC timestamp
      level:  log level name
      module: the logger name
      msg:    the formatted message

    Anything passed through `extra=` is merged in, which is how the stages
    attach the day number, the failure kind, iteration counters and so on.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def _file_handler(log_file: Path, level: int) -> logging.FileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(str(log_file), encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    return handler


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Create a structured JSON logger.

    Args:
        name: Logger name, normally __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional file that receives a copy of every line.

    Returns:
        A configured logging.Logger that writes JSON lines to stdout (or the
        stream given to set_log_stream).
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level)
    logger.setLevel(level)

    # Repeated calls for the same name must not stack handlers.
    if logger.handlers:
        return logger

    stdout_handler = logging.StreamHandler(stream=_log_stream or sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(JsonFormatter())
    logger.addHandler(stdout_handler)

    if log_file is not None:
        logger.addHandler(_file_handler(log_file, level))

    logger.propagate = False

    return logger


def set_log_level(log_level: str, log_file: Optional[Path] = None) -> None:
    """
    Apply a level (and optionally a log file) to every aocbench logger.

    Module loggers are created at import time with the default level, so the
    CLI calls this once it knows what the user asked for.
    """
    level = _resolve_log_level(log_level)

    for name in list(logging.Logger.manager.loggerDict):
        if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + "."):
            continue
        logger = logging.getLogger(name)
        if not logger.handlers:
            continue

        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

        if log_file is not None and not any(
            isinstance(h, logging.FileHandler) for h in logger.handlers
        ):
            logger.addHandler(_file_handler(log_file, level))


def set_log_stream(stream: TextIO) -> None:
    """
    Send every aocbench logger's console output to `stream`, now and for
    loggers created later. Log files are left alone.

    The CLI points logs at stderr so stdout carries only the report (or a
    solution's own output for `aocbench run`).
    """
    global _log_stream
    _log_stream = stream

    for name in list(logging.Logger.manager.loggerDict):
        if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + "."):
            continue
        for handler in logging.getLogger(name).handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(
                handler, logging.FileHandler
            ):
                handler.setStream(stream)
