"""
tests.test_api_catalog

Catalog endpoints end to end: admin lifecycle with images, group visibility,
authorization and the public image route.
"""

from __future__ import annotations

import httpx
import pytest

from conftest import png_bytes
from service_portal.storage.blobs import InMemoryBlobStore


async def _add_service(
    client: httpx.AsyncClient,
    headers: dict[str, str],
    *,
    name: str = "Wiki",
    groups: list[str] | None = None,
    image: bytes | None = None,
) -> httpx.Response:
    data = {
        "name": name,
        "redirectUrl": f"https://{name.lower()}.example",
        "groups": groups or ["staff"],
    }
    files = {"image": (f"{name}.png", image, "image/png")} if image else None
    return await client.post("/add-service", data=data, files=files, headers=headers)


@pytest.mark.asyncio
async def test_admin_creates_service_with_image(
    client: httpx.AsyncClient, admin: dict[str, str], blobs: InMemoryBlobStore
) -> None:
    r = await _add_service(client, admin, groups=["staff", "ops"], image=png_bytes(200, 100))
    assert r.status_code == 201
    service_id = r.json()["service_id"]

    r = await client.get("/services", headers=admin)
    assert r.status_code == 200
    [svc] = r.json()
    assert svc["id"] == service_id
    assert svc["redirectUrl"] == "https://wiki.example"
    assert svc["allowedGroups"] == ["staff", "ops"]
    assert (svc["originalWidth"], svc["originalHeight"]) == (200, 100)
    assert (svc["resizedWidth"], svc["resizedHeight"]) == (100, 50)
    assert svc["imageUrl"].startswith("/images/")
    assert len(blobs.keys()) == 1

    r = await client.get(svc["imageUrl"])
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/png"
    assert r.headers["cache-control"] == "public, max-age=31536000"


@pytest.mark.asyncio
async def test_comma_delimited_groups_are_split(
    client: httpx.AsyncClient, admin: dict[str, str]
) -> None:
    r = await _add_service(client, admin, groups=["staff, ops", "ops"])
    assert r.status_code == 201
    [svc] = (await client.get("/services", headers=admin)).json()
    assert svc["allowedGroups"] == ["staff", "ops"]
    assert svc["imageUrl"] is None


@pytest.mark.asyncio
async def test_listing_is_filtered_by_group_intersection(
    client: httpx.AsyncClient, admin: dict[str, str], auth_headers
) -> None:
    await _add_service(client, admin, name="Wiki", groups=["staff"])
    await _add_service(client, admin, name="Payroll", groups=["finance"])

    r = await client.get("/services", headers=auth_headers("dana", ["staff"]))
    assert [s["name"] for s in r.json()] == ["Wiki"]

    r = await client.get("/services", headers=auth_headers("eve", []))
    assert r.json() == []


@pytest.mark.asyncio
async def test_non_admin_cannot_manage_services(
    client: httpx.AsyncClient, admin: dict[str, str], auth_headers
) -> None:
    user = auth_headers("dana", ["staff"])
    r = await _add_service(client, user)
    assert r.status_code == 403
    assert r.json()["error"]["kind"] == "forbidden"

    service_id = (await _add_service(client, admin)).json()["service_id"]
    r = await client.put(f"/update-service/{service_id}", data={"name": "Hacked"}, headers=user)
    assert r.status_code == 403
    r = await client.delete(f"/delete-service/{service_id}", headers=user)
    assert r.status_code == 403

    [svc] = (await client.get("/services", headers=admin)).json()
    assert svc["name"] == "Wiki"


@pytest.mark.asyncio
async def test_missing_credential_is_401(client: httpx.AsyncClient) -> None:
    r = await client.get("/services")
    assert r.status_code == 401
    error = r.json()["error"]
    assert error["kind"] == "unauthenticated"
    assert error["retryable"] is False


@pytest.mark.asyncio
async def test_missing_groups_is_rejected_and_nothing_persisted(
    client: httpx.AsyncClient, admin: dict[str, str], blobs: InMemoryBlobStore
) -> None:
    r = await client.post(
        "/add-service",
        data={"name": "Wiki", "redirectUrl": "https://wiki.example"},
        files={"image": ("wiki.png", png_bytes(20, 10), "image/png")},
        headers=admin,
    )
    assert r.status_code == 400
    assert r.json()["error"]["kind"] == "validation_error"
    assert "groups" in r.json()["error"]["message"]
    assert (await client.get("/services", headers=admin)).json() == []
    assert blobs.keys() == []


@pytest.mark.asyncio
async def test_unreadable_image_is_a_processing_error(
    client: httpx.AsyncClient, admin: dict[str, str]
) -> None:
    r = await _add_service(client, admin, image=b"not an image at all")
    assert r.status_code == 500
    assert r.json()["error"]["kind"] == "processing_error"
    assert (await client.get("/services", headers=admin)).json() == []


@pytest.mark.asyncio
async def test_update_merges_fields_and_replaces_image(
    client: httpx.AsyncClient, admin: dict[str, str], blobs: InMemoryBlobStore
) -> None:
    r = await _add_service(client, admin, image=png_bytes(200, 100))
    service_id = r.json()["service_id"]
    [old_key] = blobs.keys()

    r = await client.put(
        f"/update-service/{service_id}",
        data={"name": "Team Wiki"},
        files={"image": ("new.png", png_bytes(300, 100), "image/png")},
        headers=admin,
    )
    assert r.status_code == 200
    svc = r.json()
    assert svc["name"] == "Team Wiki"
    assert svc["redirectUrl"] == "https://wiki.example"
    assert svc["allowedGroups"] == ["staff"]
    assert (svc["resizedWidth"], svc["resizedHeight"]) == (150, 50)

    [new_key] = blobs.keys()
    assert new_key != old_key
    assert svc["imageUrl"] == f"/images/{new_key}"
    assert (await client.get(f"/images/{old_key}")).status_code == 404


@pytest.mark.asyncio
async def test_update_of_missing_service_writes_no_blob(
    client: httpx.AsyncClient, admin: dict[str, str], blobs: InMemoryBlobStore
) -> None:
    r = await client.put(
        "/update-service/nope",
        data={"name": "x"},
        files={"image": ("x.png", png_bytes(10, 10), "image/png")},
        headers=admin,
    )
    assert r.status_code == 404
    assert r.json()["error"]["kind"] == "not_found"
    assert blobs.keys() == []


@pytest.mark.asyncio
async def test_delete_removes_record_and_image(
    client: httpx.AsyncClient, admin: dict[str, str], blobs: InMemoryBlobStore
) -> None:
    r = await _add_service(client, admin, image=png_bytes(20, 10))
    service_id = r.json()["service_id"]

    r = await client.delete(f"/delete-service/{service_id}", headers=admin)
    assert r.status_code == 200
    assert r.json() == {"status": "deleted", "id": service_id}
    assert blobs.keys() == []
    assert (await client.get("/services", headers=admin)).json() == []

    r = await client.delete(f"/delete-service/{service_id}", headers=admin)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_unknown_image_and_route_are_404(client: httpx.AsyncClient) -> None:
    r = await client.get("/images/123-missing.png")
    assert r.status_code == 404
    assert r.json()["error"]["kind"] == "not_found"

    r = await client.get("/no-such-route")
    assert r.status_code == 404
    assert r.json()["error"]["kind"] == "route_not_found"

    r = await client.patch("/services")
    assert r.status_code == 404
    assert r.json()["error"]["kind"] == "route_not_found"


@pytest.mark.asyncio
async def test_delete_succeeds_when_blob_cleanup_fails(
    client: httpx.AsyncClient,
    admin: dict[str, str],
    blobs: InMemoryBlobStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    service_id = (await _add_service(client, admin, image=png_bytes(20, 10))).json()["service_id"]

    async def _read_only(key: str) -> None:
        raise OSError("read-only bucket")

    monkeypatch.setattr(blobs, "delete", _read_only)

    r = await client.delete(f"/delete-service/{service_id}", headers=admin)
    assert r.status_code == 200
    assert r.json() == {"status": "deleted", "id": service_id}
    assert (await client.get("/services", headers=admin)).json() == []
    # The stale blob outlives its record; the record is gone regardless.
    assert len(blobs.keys()) == 1
