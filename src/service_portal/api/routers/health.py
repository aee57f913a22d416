"""
service_portal.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) validating the record store.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from sqlalchemy import text

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> dict[str, str]:
    # Goes through the store so a hung database reports `unavailable`, not a hang.
    async with request.app.state.store.snapshot() as session:
        await session.execute(text("SELECT 1"))
    return {"status": "ready"}
