"""
Organization API endpoints.

GET    /api/v1/orgs              — List orgs for the calling user
POST   /api/v1/orgs              — Create a new org (caller becomes owner)
GET    /api/v1/orgs/{orgName}    — Get org details (public)
PATCH  /api/v1/orgs/{orgName}    — Update org metadata (owner/admin)
DELETE /api/v1/orgs/{orgName}    — Delete org and its memberships (owner)
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_acting_user_id
from app.core.database import get_session
from app.services import organizations as org_service
from org_membership_shared.schemas.organizations import (
    OrgCreateRequest,
    OrgListItem,
    OrgListResponse,
    OrgResponse,
    OrgUpdateRequest,
)

# ---------------------------------------------------------------------------
# Non-org-scoped routes (no orgName in path)
# ---------------------------------------------------------------------------
router_global = APIRouter()


@router_global.get("/orgs", response_model=OrgListResponse, tags=["Organizations"])
async def list_orgs(
    user_id: uuid.UUID = Depends(require_acting_user_id),
    session: AsyncSession = Depends(get_session),
):
    """List orgs the calling user belongs to, ordered by name."""
    rows = await org_service.list_user_orgs(user_id, session)
    return OrgListResponse(
        data=[
            OrgListItem(**OrgResponse.model_validate(org).model_dump(), role=role)
            for org, role in rows
        ]
    )


@router_global.post("/orgs", response_model=OrgResponse, status_code=201, tags=["Organizations"])
async def create_org(
    body: OrgCreateRequest,
    user_id: uuid.UUID = Depends(require_acting_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Create a new organization. The creator becomes its owner."""
    org = await org_service.create_org(body, user_id, session)
    return OrgResponse.model_validate(org)


# ---------------------------------------------------------------------------
# Org-scoped routes (orgName in path)
# ---------------------------------------------------------------------------
router_scoped = APIRouter()


@router_scoped.get("", response_model=OrgResponse, tags=["Organizations"])
async def get_org(
    orgName: str,
    session: AsyncSession = Depends(get_session),
):
    """Get org details. Organization metadata is public."""
    org = await org_service.get_org(orgName, session)
    return OrgResponse.model_validate(org)


@router_scoped.patch("", response_model=OrgResponse, tags=["Organizations"])
async def update_org(
    orgName: str,
    body: OrgUpdateRequest,
    user_id: uuid.UUID = Depends(require_acting_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Update org metadata (Owner or Admin). Omitted fields are unchanged."""
    org = await org_service.update_org(orgName, body, user_id, session)
    return OrgResponse.model_validate(org)


@router_scoped.delete("", status_code=204, tags=["Organizations"])
async def delete_org(
    orgName: str,
    user_id: uuid.UUID = Depends(require_acting_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Delete the org and all memberships (Owner only)."""
    await org_service.delete_org(orgName, user_id, session)
    return Response(status_code=204)
