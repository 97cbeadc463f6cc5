"""Logging configuration using loguru.

Provides:
- Human-readable logging for interactive runs
- JSON lines for scheduled runs, carrying the bound ``document_id``
"""

from __future__ import annotations

import json
import sys
from datetime import UTC, datetime
from typing import Any

from loguru import logger


def _json_formatter(record: dict[str, Any]) -> str:
    """Format a log record as one JSON object per line."""
    log_entry: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    for key, value in record["extra"].items():
        if key not in log_entry:
            log_entry[key] = value

    if record["exception"]:
        exc = record["exception"]
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    # Escape braces: loguru treats the returned string as a format template.
    line = json.dumps(log_entry, default=str)
    return line.replace("{", "{{").replace("}", "}}") + "\n"


def _dev_formatter(record: dict[str, Any]) -> str:
    """Format log record for interactive use (human-readable)."""
    context = ""
    if record["extra"].get("document_id"):
        context = "[doc={extra[document_id]}] "
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        + context
        + "<level>{message}</level>\n"
        "{exception}"
    )


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> None:
    """Configure loguru for the importer.

    Logs go to stderr so that stdout stays free for command output.

    Args:
        json_logs: If True, output JSON lines
        log_level: Minimum log level to output
    """
    logger.remove()

    if json_logs:
        logger.add(sys.stderr, format=_json_formatter, level=log_level)
    else:
        logger.add(sys.stderr, format=_dev_formatter, level=log_level, colorize=True)


__all__ = ["logger", "setup_logging"]
