"""Structured logging for the locator service and the enrichment script.

JSON lines when ENABLE_JSON_LOGS=1 (default), otherwise a compact human
format; level from LOG_LEVEL. Besides the HTTP request fields the formatters
understand the tile extras the locator attaches (input_epsg, output_epsg,
errmsg). The enrichment script writes records to stdout, so it passes
stream=sys.stderr to keep log lines out of the data.
"""
from __future__ import annotations

import json
import logging
import os
import sys
import uuid
from time import time
from typing import IO, Optional

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_FIELDS = ("request_id", "path", "method", "status", "duration_ms")
_TILE_FIELDS = ("input_epsg", "output_epsg", "errmsg")


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        for attr in _REQUEST_FIELDS + _TILE_FIELDS:
            if hasattr(record, attr):
                base[attr] = getattr(record, attr)
        if record.exc_info and record.exc_info[0]:
            base["exc_type"] = record.exc_info[0].__name__
        return json.dumps(base, ensure_ascii=False, default=str)


class _PlainFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [
            self.formatTime(record, datefmt="%H:%M:%S"),
            record.levelname[0],
            record.name + ":",
            record.getMessage(),
        ]
        if hasattr(record, "request_id"):
            parts.append(f"rid={record.request_id}")
        if hasattr(record, "status"):
            parts.append(f"{record.method} {record.path} -> {record.status}")
        if hasattr(record, "input_epsg"):
            parts.append(f"crs={record.input_epsg}->{getattr(record, 'output_epsg', '?')}")
        if hasattr(record, "errmsg"):
            parts.append(f"errmsg={record.errmsg!r}")
        return " ".join(parts)


def make_formatter(json_enabled: Optional[bool] = None) -> logging.Formatter:
    if json_enabled is None:
        json_enabled = os.getenv("ENABLE_JSON_LOGS", "1") == "1"
    return _JsonFormatter() if json_enabled else _PlainFormatter()


def configure_logging(stream: Optional[IO[str]] = None, level: Optional[str] = None) -> None:
    """Install a single root handler; later calls are no-ops."""
    if getattr(configure_logging, "_configured", False):
        return
    root = logging.getLogger()
    root.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())
    for h in list(root.handlers):  # drop uvicorn's default handlers
        root.removeHandler(h)
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(make_formatter())
    root.addHandler(handler)
    configure_logging._configured = True  # type: ignore[attr-defined]


async def logging_middleware(request, call_next):
    # Reuse a caller-supplied id so log lines correlate across services
    rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
    start = time()
    request.state.request_id = rid
    logger = logging.getLogger("request")
    logger.info("request.start", extra={"request_id": rid, "path": request.url.path, "method": request.method})
    response = None
    try:
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
    finally:
        logger.info(
            "request.end",
            extra={
                "request_id": rid,
                "path": request.url.path,
                "method": request.method,
                "status": getattr(response, "status_code", None),
                "duration_ms": round((time() - start) * 1000.0, 2),
            },
        )
