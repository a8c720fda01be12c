"""Logging setup: JSON or plain records, optional rotating file, secret masking."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional

from ..utils.redaction import REDACTED, is_sensitive_key, redact
from .config import LoggingConfig

SERVICE_NAME = "demo-users-api"
PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Attributes every LogRecord carries; anything else arrived via ``extra=``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


def record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    """Return the structured fields attached to a record."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class SensitiveFieldFilter(logging.Filter):
    """Mask values stored under secret-looking keys in structured extras."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in record_extras(record).items():
            if is_sensitive_key(key) and value not in (None, ""):
                setattr(record, key, REDACTED)
            elif isinstance(value, (dict, list, tuple)):
                setattr(record, key, redact(value))
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, environment: str = "development", service: str = SERVICE_NAME):
        super().__init__()
        self.environment = environment
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(record_extras(record))
        if record.exc_info:
            entry["stack"] = self.formatException(record.exc_info)
        entry["service"] = self.service
        entry["environment"] = self.environment
        return json.dumps(entry, default=str)


def _tag(handler: logging.Handler) -> logging.Handler:
    handler._installed_by_app = True  # type: ignore[attr-defined]
    return handler


def configure_logging(
    config: LoggingConfig,
    environment: str = "development",
    logger: Optional[logging.Logger] = None,
) -> List[logging.Handler]:
    """Install the application's handlers on ``logger`` (root by default).

    Calling it again replaces the handlers installed previously and leaves
    handlers added by others (pytest's ``caplog`` for one) alone.
    """
    target = logger or logging.getLogger()
    for handler in list(target.handlers):
        if getattr(handler, "_installed_by_app", False):
            target.removeHandler(handler)
            handler.close()

    if config.format == "json":
        formatter: logging.Formatter = JsonFormatter(environment=environment)
    else:
        formatter = logging.Formatter(PLAIN_FORMAT)

    handlers: List[logging.Handler] = [_tag(logging.StreamHandler())]
    if config.file:
        handlers.append(
            _tag(
                RotatingFileHandler(
                    config.file,
                    maxBytes=config.max_bytes,
                    backupCount=config.max_files,
                    encoding="utf-8",
                )
            )
        )

    redactor = SensitiveFieldFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(redactor)
        target.addHandler(handler)

    target.setLevel(LEVELS.get(config.level, logging.INFO))
    return handlers
