"""Logging setup for the ``blogapi`` logger.

Records are written to stdout, one JSON object per line by default
(``LOG_FORMAT=text`` switches to a plain formatter for local runs). Context
is passed through ``extra=``; the keys in ``CONTEXT_FIELDS`` are copied into
the JSON output when present.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

LOGGER_NAME = "blogapi"

CONTEXT_FIELDS = ("request_id", "user_id", "action", "method", "path", "status", "duration_ms")

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> logging.Logger:
    """(Re)configure the application logger; safe to call once per app."""
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(log_level.upper())
    app_logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "text":
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    else:
        handler.setFormatter(JSONFormatter())
    app_logger.handlers = [handler]

    return app_logger


logger = setup_logging()
