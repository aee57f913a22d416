"""
service_portal.observability.logging

Structured logging configuration for the portal.

Responsibilities:
- Configure `structlog` for JSON logs stamped with the service name.
- Keep session credentials out of log lines.
- Bind the authenticated caller into the request's log context.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Event keys that may carry a raw session credential.
REDACTED_KEYS = frozenset({"authorization", "cookie", "session_token", "token"})

# Chatty at INFO; the request middleware already covers what they report.
_QUIET_LOGGERS = ("httpx", "httpcore", "aiosqlite", "PIL")


def configure_logging(*, service_name: str, level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            _redact_credentials,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def _redact_credentials(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_user(user_key: str) -> None:
    # Cleared with the rest of the request context by RequestContextMiddleware.
    structlog.contextvars.bind_contextvars(user=user_key)
