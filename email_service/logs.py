"""
JSON line logging for the email service.

Every record becomes one JSON object on a single line:
{"time": ..., "message": ..., "trace_id": ..., "span_id": ..., "level": ...}
plus "error"/"backtrace" for failures. Trace fields and error details are
passed through ``extra`` so the call sites stay plain ``logger.info(...)``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Optional

LOGGER_NAME = "email_service"


def format_timestamp(created: float) -> str:
    ts = datetime.fromtimestamp(created, tz=timezone.utc)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": format_timestamp(record.created),
            "message": record.getMessage(),
        }
        for field in ("trace_id", "span_id"):
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        entry["level"] = record.levelname
        for field in ("error", "backtrace"):
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        return json.dumps(entry, default=str)


def configure_logging(stream: Optional[IO[str]] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Route the service logger to ``stream`` (stdout by default) as JSON lines.

    Safe to call repeatedly: previous handlers are replaced, not stacked.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(JsonLogFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
