"""
tests.test_api_notices

Notice endpoints: fan-out publishing, per-recipient inboxes, admin moderation.
"""

from __future__ import annotations

import httpx
import pytest


async def _publish(
    client: httpx.AsyncClient, headers: dict[str, str], **overrides
) -> httpx.Response:
    body = {"userId": ["u1", "u2"], "type": "warning", "title": "Maintenance", "content": "Tonight"}
    body.update(overrides)
    return await client.post("/add-message", json=body, headers=headers)


@pytest.mark.asyncio
async def test_publish_fans_out_one_notice_per_recipient(
    client: httpx.AsyncClient, admin: dict[str, str], auth_headers
) -> None:
    r = await _publish(client, admin)
    assert r.status_code == 201
    ids = r.json()["message_ids"]
    assert len(ids) == 2 and len(set(ids)) == 2

    r = await client.get("/messages", headers=auth_headers("u1"))
    [notice] = r.json()
    assert notice["userId"] == "u1"
    assert notice["type"] == "warning"
    assert (notice["title"], notice["content"]) == ("Maintenance", "Tonight")
    assert notice["dismissed"] is False

    assert len((await client.get("/messages", headers=auth_headers("u2"))).json()) == 1
    assert (await client.get("/messages", headers=auth_headers("u3"))).json() == []


@pytest.mark.asyncio
async def test_single_recipient_string_is_accepted(
    client: httpx.AsyncClient, admin: dict[str, str]
) -> None:
    r = await _publish(client, admin, userId="root@example.com", type="information")
    assert r.status_code == 201
    [notice] = (await client.get("/messages", headers=admin)).json()
    assert notice["userId"] == "root@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [{"userId": []}, {"title": ""}, {"content": None}, {"type": "critical"}],
)
async def test_publish_validation_persists_nothing(
    client: httpx.AsyncClient, admin: dict[str, str], overrides: dict
) -> None:
    r = await _publish(client, admin, **overrides)
    assert r.status_code == 400
    assert r.json()["error"]["kind"] == "validation_error"
    assert (await client.get("/all-messages", headers=admin)).json() == []


@pytest.mark.asyncio
async def test_non_admin_cannot_publish_or_list_all(
    client: httpx.AsyncClient, auth_headers
) -> None:
    user = auth_headers("u1", ["staff"])
    assert (await _publish(client, user)).status_code == 403
    assert (await client.get("/all-messages", headers=user)).status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["POST", "PUT"])
async def test_update_and_dismiss(
    client: httpx.AsyncClient, admin: dict[str, str], auth_headers, method: str
) -> None:
    first, second = (await _publish(client, admin)).json()["message_ids"]

    r = await client.request(
        method, f"/update-message/{first}", json={"title": "Rescheduled"}, headers=admin
    )
    assert r.status_code == 200
    assert r.json()["title"] == "Rescheduled"
    assert r.json()["content"] == "Tonight"
    assert r.json()["type"] == "warning"

    r = await client.request(
        method, f"/update-message/{second}", json={"dismissed": True}, headers=admin
    )
    assert r.json()["dismissed"] is True

    everything = (await client.get("/all-messages", headers=admin)).json()
    assert [n["id"] for n in everything] == [first]
    assert (await client.get("/messages", headers=auth_headers("u2"))).json() == []

    r = await client.request(method, "/update-message/missing", json={}, headers=admin)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_delete_message(client: httpx.AsyncClient, admin: dict[str, str]) -> None:
    first, _ = (await _publish(client, admin)).json()["message_ids"]

    r = await client.delete(f"/delete-message/{first}", headers=admin)
    assert r.status_code == 200
    assert r.json() == {"status": "deleted", "id": first}
    assert first not in {n["id"] for n in (await client.get("/all-messages", headers=admin)).json()}

    assert (await client.delete(f"/delete-message/{first}", headers=admin)).status_code == 404
