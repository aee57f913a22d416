"""
service_portal.api.errors

Exception handlers that render every failure as a structured JSON payload.

Responsibilities:
- `PortalError` subclasses -> their own status and kind.
- Request validation failures -> 400 `validation_error`.
- Unmatched verb+path -> 404 `route_not_found`.
- Anything else -> logged, 500 `internal`.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_404_NOT_FOUND, HTTP_405_METHOD_NOT_ALLOWED

from service_portal.errors import InternalError, PortalError, RouteNotFound, ValidationError
from service_portal.observability.logging import get_logger

log = get_logger(__name__)


def _render(err: PortalError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content=err.to_payload())


async def _portal_error(_: Request, exc: PortalError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("request_failed", kind=exc.kind, error=exc.message)
    return _render(exc)


async def _request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted(
        {".".join(str(p) for p in e.get("loc", ())[1:]) or "body" for e in exc.errors()}
    )
    return _render(ValidationError(f"Invalid request fields: {', '.join(fields)}"))


async def _http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (HTTP_404_NOT_FOUND, HTTP_405_METHOD_NOT_ALLOWED):
        return _render(RouteNotFound(f"No route for {request.method} {request.url.path}"))
    err = PortalError(str(exc.detail))
    err.status_code = exc.status_code
    err.kind = "http_error"
    return _render(err)


async def _unhandled(_: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_error", error_type=type(exc).__name__)
    return _render(InternalError("Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, _portal_error)
    app.add_exception_handler(RequestValidationError, _request_validation)
    app.add_exception_handler(StarletteHTTPException, _http_exception)
    app.add_exception_handler(Exception, _unhandled)
