"""Structured Logging - one JSON object per line for the ban registry.

Invariants:
    - Every line carries timestamp (record time, UTC), level, logger, message
    - Ban context passed via extra= (ban_id, account_id, entity_id, ...) is
      copied through only when set
    - setup_logging replaces the root handlers, so repeated lifespans
      do not duplicate output
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "ban_id", "account_id", "entity_id", "entity_type",
    "error_code", "path", "status_code",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # httpx logs every ESI request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
