"""
Structured logging setup (JSONL format).

The tutorial owns the terminal while it runs, so by default everything goes
to a rotating JSONL file. A console sink (JSON lines on stderr) is only added
when a console level is requested, e.g. TMUX_TUTORIAL_LOG_LEVEL=DEBUG.
"""

from __future__ import annotations

import json
import os
import sys
import traceback
from contextvars import ContextVar
from pathlib import Path

import platformdirs
from loguru import logger

APP_NAME = "tmux-tutorial"
ENV_CONSOLE_LEVEL = "TMUX_TUTORIAL_LOG_LEVEL"

# Correlation ID for one scenario run
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)


def json_sink(message) -> None:
    """JSONL sink - writes one object per record to stderr."""
    record = message.record
    log_entry = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        "level": record["level"].name.lower(),
        "component": record["function"],
        "operation": record["extra"].get("operation", "unknown"),
        "operation_status": record["extra"].get("status", None),
        "trace_id": record["extra"].get("trace_id") or trace_id_var.get(),
        "message": record["message"],
        "context": {k: v for k, v in record["extra"].items()
                    if k not in ("operation", "status", "trace_id", "metrics")},
        "metrics": record["extra"].get("metrics", {}),
        "error": None,
    }

    if record["exception"]:
        exc_type, exc_value, exc_tb = record["exception"]
        tb_lines = traceback.format_tb(exc_tb) if exc_tb else []
        log_entry["error"] = {
            "type": exc_type.__name__ if exc_type else "Unknown",
            "message": str(exc_value) if exc_value else "Unknown error",
            "traceback_lines": tb_lines,
        }

    try:
        sys.stderr.write(json.dumps(log_entry, default=str) + "\n")
    except (OSError, TypeError, ValueError) as e:
        try:
            sys.stderr.write(f"[LOG_ERROR] Failed to write log: {e}\n")
        except OSError:
            pass


def known_level(name: str) -> bool:
    """True when loguru has a level called `name` (case-insensitive)."""
    try:
        logger.level(name.upper())
    except ValueError:
        return False
    return True


def setup_logger(console_level: str | None = None, file_level: str = "DEBUG"):
    """
    Configure loguru for the tutorial.

    Args:
        console_level: Level for the stderr JSON sink. None or "" disables it
            unless TMUX_TUTORIAL_LOG_LEVEL is set.
        file_level: Level for the rotating JSONL file.

    Unknown level names are dropped (console) or replaced by DEBUG (file) and
    logged once the sinks are up.

    Returns:
        The configured loguru logger.
    """
    logger.remove()

    rejected = {}
    console_level = os.environ.get(ENV_CONSOLE_LEVEL) or console_level
    if console_level and not known_level(console_level):
        rejected["console_level"] = console_level
        console_level = None
    if not known_level(file_level):
        rejected["file_level"] = file_level
        file_level = "DEBUG"

    if console_level:
        logger.add(json_sink, level=console_level.upper())

    # Linux: ~/.local/state/tmux-tutorial/log/
    # macOS: ~/Library/Logs/tmux-tutorial/
    try:
        log_dir = Path(platformdirs.user_log_dir(appname=APP_NAME, ensure_exists=True))
    except OSError as e:
        logger.warning(
            "Log directory unavailable - file logging disabled",
            operation="setup_logger",
            status="fallback",
            error=str(e),
        )
        log_dir = None
    else:
        logger.add(
            str(log_dir / "tutorial.jsonl"),
            format="{message}",
            serialize=True,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            level=file_level.upper(),
        )

    for setting, value in rejected.items():
        logger.warning(
            "Unknown log level ignored",
            operation="setup_logger",
            status="fallback",
            setting=setting,
            value=value,
        )

    logger.debug(
        "Logger initialized",
        operation="setup_logger",
        status="success",
        log_dir=str(log_dir) if log_dir else None,
        console_level=console_level or None,
    )
    return logger
