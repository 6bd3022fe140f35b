"""Structured Logging - JSON formatter, setup, and the injectable service logger.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (service_name, env, trace_id, user_id, error) surfaced when present
    - JSON format in production, human-readable in development
    - ServiceLogger is built once per application and handed to whoever logs;
      request-scoped loggers are derived with bind(trace_id=...)

Design Decisions:
    - JSONFormatter over third-party libs: stdlib logging end to end
    - setup_logging runs on every lifespan start; it installs at most one root handler
    - LoggerAdapter carries bound fields so call sites only pass event-specific extras
"""

import logging
import json
from datetime import datetime, timezone

LOGGER_NAME = "user_api"
_HANDLER_MARK = "_user_api_handler"

_STRUCTURED_FIELDS = (
    "service_name", "env", "trace_id", "user_id", "count",
    "error", "error_code", "path", "method",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _STRUCTURED_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application. Safe to call more than once."""
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if any(getattr(h, _HANDLER_MARK, False) for h in logging.root.handlers):
        return
    handler = logging.StreamHandler()
    setattr(handler, _HANDLER_MARK, True)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)


class ServiceLogger(logging.LoggerAdapter):
    """Logger adapter that stamps bound fields onto every record.

    Per-call ``extra`` is merged over the bound fields instead of replacing them.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def bind(self, **fields) -> "ServiceLogger":
        """Derive a logger carrying additional fields (e.g. trace_id)."""
        return ServiceLogger(self.logger, {**self.extra, **fields})


def build_service_logger(service_name: str, environment: str) -> ServiceLogger:
    """Construct the process-wide logger tagged with service identity."""
    return ServiceLogger(
        logging.getLogger(LOGGER_NAME),
        {"service_name": service_name, "env": environment},
    )
