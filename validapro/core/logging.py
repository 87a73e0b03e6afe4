import json
import logging
from datetime import datetime, timezone
from typing import Optional

from validapro.config import get_settings

# Attributes passed through ``extra=`` that belong in structured output.
CONTEXT_FIELDS = ("store_id", "product_id", "user_id", "change_type")

_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "openpyxl")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger from settings; ``level`` overrides LOG_LEVEL."""
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()
    root_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler()
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )

    root = logging.getLogger()
    root.setLevel(root_level)
    root.handlers.clear()
    root.addHandler(handler)

    if root_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
