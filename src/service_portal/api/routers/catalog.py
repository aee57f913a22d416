"""
service_portal.api.routers.catalog

Catalog endpoints (multipart forms) and the public image route.

Responsibilities:
- List the entries visible to the caller.
- Admin create/update/delete with optional image upload.
- Serve stored images with long-lived cache headers.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response
from starlette.status import HTTP_201_CREATED

from service_portal.api.deps import blob_store, catalog_service, settings_dep
from service_portal.api.schemas import DeletedResponse, ServiceCreatedResponse, ServiceResponse
from service_portal.auth.deps import get_identity
from service_portal.auth.models import Identity
from service_portal.db.validation import clean_groups
from service_portal.services.catalog import CatalogService
from service_portal.settings import Settings
from service_portal.storage.blobs import BlobStore

router = APIRouter(tags=["catalog"])


def _form_groups(values: list[str] | None) -> list[str]:
    # Accepts repeated `groups` fields, comma-delimited values, or a mix of both.
    return clean_groups(part for value in values or () for part in value.split(","))


async def _read_upload(upload: UploadFile | None) -> bytes | None:
    if upload is None:
        return None
    data = await upload.read()
    return data or None


@router.get("/services", response_model=list[ServiceResponse])
async def list_services(
    identity: Identity = Depends(get_identity),
    catalog: CatalogService = Depends(catalog_service),
) -> list[ServiceResponse]:
    entries = await catalog.list_visible(identity)
    return [ServiceResponse.from_entry(e) for e in entries]


@router.post("/add-service", response_model=ServiceCreatedResponse, status_code=HTTP_201_CREATED)
async def add_service(
    name: str | None = Form(default=None),
    redirect_url: str | None = Form(default=None, alias="redirectUrl"),
    groups: list[str] | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    identity: Identity = Depends(get_identity),
    catalog: CatalogService = Depends(catalog_service),
) -> ServiceCreatedResponse:
    entry = await catalog.create(
        identity,
        name=name,
        redirect_url=redirect_url,
        groups=_form_groups(groups),
        image=await _read_upload(image),
    )
    return ServiceCreatedResponse(service_id=entry.id)


@router.put("/update-service/{entry_id}", response_model=ServiceResponse)
async def update_service(
    entry_id: str,
    name: str | None = Form(default=None),
    redirect_url: str | None = Form(default=None, alias="redirectUrl"),
    groups: list[str] | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    identity: Identity = Depends(get_identity),
    catalog: CatalogService = Depends(catalog_service),
) -> ServiceResponse:
    entry = await catalog.update(
        identity,
        entry_id,
        name=name,
        redirect_url=redirect_url,
        groups=_form_groups(groups),
        image=await _read_upload(image),
    )
    return ServiceResponse.from_entry(entry)


@router.delete(
    "/delete-service/{entry_id}",
    response_model=DeletedResponse,
    response_model_exclude_none=True,
)
async def delete_service(
    entry_id: str,
    identity: Identity = Depends(get_identity),
    catalog: CatalogService = Depends(catalog_service),
) -> DeletedResponse:
    removed = await catalog.delete(identity, entry_id)
    return DeletedResponse(id=removed.id)


@router.get("/images/{key}")
async def get_image(
    key: str,
    blobs: BlobStore = Depends(blob_store),
    settings: Settings = Depends(settings_dep),
) -> Response:
    # Public: image keys are unguessable and carry no catalog data.
    obj = await blobs.get(key)
    return Response(
        content=obj.data,
        media_type=obj.content_type,
        headers={"Cache-Control": f"public, max-age={settings.image_cache_max_age}"},
    )
