"""
Logging configuration.
Plain text for development, one JSON object per line otherwise.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from crudhub.config import Settings


TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Attributes every LogRecord has; anything else was passed through extra=
_RECORD_ATTRIBUTES = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """JSON log formatter emitting stable keys plus any extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_"):
                payload[key] = value

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, separators=(",", ":"), ensure_ascii=False)


def configure_logging(settings: Settings) -> None:
    """
    Configure the root logger once at startup.
    Debug mode forces the DEBUG level.
    """
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    if settings.log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    # force=True replaces handlers left by a previous configuration (reload, tests)
    logging.basicConfig(level=level, handlers=[handler], force=True)

    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
