"""
service_portal.observability.middleware

HTTP middleware for request-scoped logging context.

Responsibilities:
- Generate/propagate request IDs (`x-request-id`).
- Bind request metadata into structlog contextvars for the request's lifetime.
- Emit exactly one completion (or failure) event per request with latency.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from service_portal.observability.logging import get_logger

log = get_logger(__name__)

REQUEST_ID_HEADER = "x-request-id"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )
        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception:
            # Only reached when no exception handler produced a response.
            log.exception("request_failed", duration_ms=_elapsed_ms(started))
            raise
        else:
            log.info(
                "request_completed",
                status=response.status_code,
                duration_ms=_elapsed_ms(started),
            )
        finally:
            # `user` is bound later by the auth gate; drop it with everything else.
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
