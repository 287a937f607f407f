"""Structured Logging - JSON formatter and setup for the verification service.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - Extra fields (verification_id, purpose_code, channel, error_code, path)
      surfaced when present
    - Plaintext codes are never passed as log extras

Design Decisions:
    - stdlib logging + small JSON formatter, set up once in the FastAPI lifespan
    - setup_logging replaces existing root handlers so repeated app startups
      (tests, reloads) do not duplicate output
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "verification_id", "user_id", "purpose_code", "channel",
    "error_code", "path", "event",
)


class JSONFormatter(logging.Formatter):
    """Format logs as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = str(val)
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure root logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
