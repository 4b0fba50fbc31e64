"""
Logging for the oraforge loggers.

Records may carry the context attributes in CONTEXT_FIELDS, passed through
`extra=`; both formatters append them. JSON output is meant for CI and log
collectors, the colored text output for terminals.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Optional

# record attribute -> label in text output
CONTEXT_LABELS = {
    'table_name': 'table',
    'index_name': 'index',
    'operation': 'op',
    'oracle_version': 'oracle',
}
CONTEXT_FIELDS = tuple(CONTEXT_LABELS)


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for machine parsing."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field_name in CONTEXT_FIELDS:
            if hasattr(record, field_name):
                log_entry[field_name] = getattr(record, field_name)

        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Format log records with ANSI colors for console output."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        message = record.getMessage()

        context_parts = [
            f"{label}={getattr(record, field_name)}"
            for field_name, label in CONTEXT_LABELS.items()
            if hasattr(record, field_name)
        ]
        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        if self.use_color and level in self.COLORS:
            return f"{self.COLORS[level]}[{level}]{self.RESET} {message}{context_str}"
        else:
            return f"[{level}] {message}{context_str}"


def setup_logging(
    verbose: int = 0,
    log_format: str = "text",
    no_color: bool = False
) -> logging.Logger:
    """
    Configure and return the oraforge logger.

    Args:
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
        log_format: Output format - "text" or "json"
        no_color: Disable ANSI colors in text output

    Returns:
        Configured logger instance
    """
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger("oraforge")
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if log_format == "json":
        formatter = JSONFormatter()
    else:
        use_color = not no_color and sys.stderr.isatty()
        formatter = ColoredFormatter(use_color=use_color)

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Optional module name to append to 'oraforge'

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"oraforge.{name}")
    return logging.getLogger("oraforge")
