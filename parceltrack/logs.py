"""JSON logging to a file, with request details for HTTP handlers."""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Any

LOGGER_NAME = "parceltrack"
TIMESTAMP_FORMAT = "%m-%d-%Y %H:%M:%S"

_RESERVED = frozenset({"file", "func", "level", "msg", "time"})

_logger = logging.getLogger(LOGGER_NAME)


class JsonFormatter(logging.Formatter):
    """Render records as indented JSON objects with sorted keys."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "file": f"{record.pathname}:{record.lineno}",
            "func": f"{record.module}.{record.funcName}",
            "level": record.levelname.lower(),
            "msg": record.getMessage(),
            "time": time.strftime(TIMESTAMP_FORMAT, time.localtime(record.created)),
        }
        for key, value in (getattr(record, "fields", None) or {}).items():
            entry[f"fields.{key}" if key in _RESERVED else key] = value
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, indent=2, sort_keys=True, default=str)


def init_logging(filename: str | os.PathLike[str]) -> logging.Logger:
    """Send info-level JSON logs to a freshly truncated file, or stderr if it cannot be created."""
    for handler in list(_logger.handlers):
        _logger.removeHandler(handler)
        handler.close()
    _logger.setLevel(logging.INFO)
    _logger.propagate = False
    formatter = JsonFormatter()
    try:
        handler: logging.Handler = logging.FileHandler(filename, mode="w", encoding="utf-8")
    except OSError:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        _logger.addHandler(handler)
        _logger.info("file not created")
        return _logger
    handler.setFormatter(formatter)
    _logger.addHandler(handler)
    return _logger


def _request_uri(request: Any) -> str:
    environ = getattr(request, "environ", None) or {}
    raw = environ.get("REQUEST_URI") or environ.get("RAW_URI")
    if raw:
        return raw
    query = getattr(request, "query_string", b"") or b""
    if isinstance(query, bytes):
        query = query.decode("latin-1")
    return request.path + (f"?{query}" if query else "")


def log_request(message: str, request: Any) -> None:
    """Log a message together with the request's URI, method and host."""
    fields = {
        "path": _request_uri(request),
        "type": request.method,
        "host": request.host,
    }
    _logger.info(message, extra={"fields": fields}, stacklevel=2)


def info(message: str) -> None:
    """Log a plain info message."""
    _logger.info(message, stacklevel=2)