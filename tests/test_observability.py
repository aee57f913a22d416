"""
tests.test_observability

Request-id propagation and credential redaction in log events.
"""

from __future__ import annotations

import httpx
import pytest

from service_portal.observability.logging import _redact_credentials


def test_credentials_are_redacted_from_events() -> None:
    event = {"event": "x", "authorization": "Bearer abc", "cookie": "sid=1", "user": "alice"}
    out = _redact_credentials(None, "info", event)
    assert out["authorization"] == "[redacted]"
    assert out["cookie"] == "[redacted]"
    assert out["user"] == "alice"


@pytest.mark.asyncio
async def test_request_id_is_echoed_or_generated(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "req-123"})
    assert r.headers["x-request-id"] == "req-123"

    r = await client.get("/healthz")
    assert len(r.headers["x-request-id"]) == 32
