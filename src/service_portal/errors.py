"""
service_portal.errors

Failure taxonomy shared by every layer.

Responsibilities:
- Define one exception type per failure kind, each carrying its HTTP status.
- Give the API layer a single structured payload shape to render.
"""

from __future__ import annotations

from typing import Any

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class PortalError(Exception):
    kind: str = "internal"
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": {
                "kind": self.kind,
                "message": self.message,
                "retryable": self.retryable,
            }
        }


class Unauthenticated(PortalError):
    kind = "unauthenticated"
    status_code = HTTP_401_UNAUTHORIZED


class Forbidden(PortalError):
    kind = "forbidden"
    status_code = HTTP_403_FORBIDDEN


class NotFound(PortalError):
    kind = "not_found"
    status_code = HTTP_404_NOT_FOUND


class RouteNotFound(PortalError):
    kind = "route_not_found"
    status_code = HTTP_404_NOT_FOUND


class ValidationError(PortalError):
    kind = "validation_error"
    status_code = HTTP_400_BAD_REQUEST


class Unavailable(PortalError):
    # Provider/store unreachable or over budget; the client may retry.
    kind = "unavailable"
    retryable = True


class ProcessingError(PortalError):
    kind = "processing_error"


class InternalError(PortalError):
    kind = "internal"


# --- Module Notes -----------------------------------------------------------
# Exception handlers in `api.errors` translate these into JSON responses; nothing
# below the API layer imports FastAPI.
