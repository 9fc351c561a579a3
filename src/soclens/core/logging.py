"""Stderr logging for SOC Lens.

stdout is reserved for results; every diagnostic line goes to stderr,
either as plain text or as one JSON object per line.
"""

import json
import sys
from datetime import UTC, datetime
from typing import Any, Literal

LogLevel = Literal["debug", "info", "warning", "error"]
LogFormat = Literal["text", "json"]

_verbose = False
_quiet = False
_log_format: LogFormat = "text"


def set_verbose(verbose: bool) -> None:
    """Enable debug output."""
    global _verbose
    _verbose = verbose


def configure_logging(log_format: LogFormat = "text", quiet: bool = False) -> None:
    """Configure logging settings.

    Args:
        log_format: "text" or "json" lines on stderr
        quiet: Suppress debug and info output
    """
    global _log_format, _quiet
    _log_format = log_format
    _quiet = quiet


def _enabled(level: LogLevel) -> bool:
    if level == "debug":
        return _verbose and not _quiet
    if level == "info":
        return not _quiet
    return True


def _render(message: str, level: LogLevel, context: dict[str, Any]) -> str:
    if _log_format == "json":
        return json.dumps(
            {
                "timestamp": datetime.now(UTC).isoformat(),
                "level": level,
                "message": message,
                **context,
            },
            default=str,
        )

    if context:
        message += " (" + " ".join(f"{k}={v}" for k, v in context.items()) + ")"
    if level == "info":
        return message
    return f"[{level.upper()}] {message}"


def log(message: str, level: LogLevel = "info", **context: Any) -> None:
    """Write a message to stderr if its level is enabled.

    Args:
        message: Log message
        level: Log level
        **context: Key/value details (framework, path, counts)
    """
    if _enabled(level):
        print(_render(message, level, context), file=sys.stderr)


def debug(message: str, **context: Any) -> None:
    """Log a debug message."""
    log(message, level="debug", **context)


def info(message: str, **context: Any) -> None:
    """Log an info message."""
    log(message, level="info", **context)


def warning(message: str, **context: Any) -> None:
    """Log a warning message."""
    log(message, level="warning", **context)


def error(message: str, **context: Any) -> None:
    """Log an error message."""
    log(message, level="error", **context)
