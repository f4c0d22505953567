"""Process-wide logging for the gateway.

One stdout handler on the root logger, emitting a JSON object per line by
default. Registry calls attach ``operation``, ``error_code`` and similar
context through ``extra``; those keys are copied into the JSON object.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import Settings, get_settings

HANDLER_NAME = "sam-gateway"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(service)s]: %(message)s"

# Third-party loggers that are too chatty at INFO.
_QUIETED_LOGGERS: Dict[str, int] = {
  "uvicorn.access": logging.WARNING,
  "httpx": logging.WARNING,
  "httpcore": logging.WARNING,
}

_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "service"}


def _context_fields(record: logging.LogRecord) -> Dict[str, Any]:
  fields: Dict[str, Any] = {}
  for key, value in vars(record).items():
    if key.startswith("_") or key in _STANDARD_ATTRS:
      continue
    if value is None or isinstance(value, (str, int, float, bool)):
      fields[key] = value
  return fields


class ServiceFilter(logging.Filter):
  """Stamps every record with the service name."""

  def __init__(self, service: str):
    super().__init__()
    self.service = service

  def filter(self, record: logging.LogRecord) -> bool:
    record.service = self.service
    return True


class JsonFormatter(logging.Formatter):
  def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
    created = datetime.fromtimestamp(record.created, tz=timezone.utc)
    payload: Dict[str, Any] = {
      "time": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
      "level": record.levelname,
      "service": getattr(record, "service", None),
      "logger": record.name,
      "message": record.getMessage(),
    }
    for key, value in _context_fields(record).items():
      payload.setdefault(key, value)
    if record.exc_info:
      payload["error"] = self.formatException(record.exc_info)
    return json.dumps(payload, ensure_ascii=False)


def _build_handler(settings: Settings) -> logging.Handler:
  handler = logging.StreamHandler(sys.stdout)
  handler.set_name(HANDLER_NAME)
  handler.addFilter(ServiceFilter(settings.service_name))
  if settings.log_format.lower() == "text":
    handler.setFormatter(logging.Formatter(TEXT_FORMAT))
  else:
    handler.setFormatter(JsonFormatter())
  return handler


def configure_logging(settings: Optional[Settings] = None) -> logging.Handler:
  """Install the gateway handler on the root logger and return it.

  Calling it again replaces the handler installed earlier; handlers added
  by anything else are left in place.
  """
  settings = settings or get_settings()
  root = logging.getLogger()
  for existing in list(root.handlers):
    if existing.get_name() == HANDLER_NAME:
      root.removeHandler(existing)

  handler = _build_handler(settings)
  root.addHandler(handler)
  root.setLevel(settings.log_level.upper())

  for name, level in _QUIETED_LOGGERS.items():
    logging.getLogger(name).setLevel(level)
  return handler
