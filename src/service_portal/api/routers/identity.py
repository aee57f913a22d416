"""
service_portal.api.routers.identity

Caller identity and the admin user directory.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from service_portal.api.deps import identity_directory
from service_portal.api.schemas import DirectoryEntry, WhoAmIResponse
from service_portal.auth.deps import get_identity
from service_portal.auth.models import Identity
from service_portal.auth.policy import is_admin
from service_portal.services.directory import IdentityDirectory

router = APIRouter(tags=["identity"])


@router.get("/whoami", response_model=WhoAmIResponse)
async def whoami(identity: Identity = Depends(get_identity)) -> WhoAmIResponse:
    return WhoAmIResponse(
        username=identity.key,
        display_name=identity.display_name or identity.key,
        email=identity.email,
        avatar_url=identity.avatar_url,
        groups=sorted(identity.groups),
        is_admin=is_admin(identity),
    )


@router.get("/user-ids", response_model=list[DirectoryEntry])
async def list_user_ids(
    identity: Identity = Depends(get_identity),
    directory: IdentityDirectory = Depends(identity_directory),
) -> list[DirectoryEntry]:
    rows = await directory.list_identities(identity)
    return [DirectoryEntry.from_row(r) for r in rows]
