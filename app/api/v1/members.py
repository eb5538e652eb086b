"""
Membership API endpoints.

GET    /api/v1/orgs/{orgName}/members            — List members
POST   /api/v1/orgs/{orgName}/members            — Add a member (invite)
PATCH  /api/v1/orgs/{orgName}/members/{userId}   — Change a member's role
DELETE /api/v1/orgs/{orgName}/members/{userId}   — Remove a member (or leave)
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_acting_user_id, require_acting_user_id
from app.core.config import Settings, get_settings
from app.core.database import get_session
from app.core.errors import AuthenticationRequiredError
from app.models.membership import OrganizationMember
from app.models.user import User
from app.repositories.users import UserStore
from app.services import members as member_service
from org_membership_shared.schemas.members import (
    MemberAddRequest,
    MemberListResponse,
    MemberResponse,
    MemberRoleUpdateRequest,
)

router = APIRouter()


def _member_response(member: OrganizationMember, user: Optional[User] = None) -> MemberResponse:
    resp = MemberResponse.model_validate(member)
    if user is not None:
        resp.name = user.name
        resp.email = user.email
    return resp


@router.get("", response_model=MemberListResponse, tags=["Members"])
async def list_members(
    orgName: str,
    user_id: Optional[uuid.UUID] = Depends(get_acting_user_id),
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_session),
):
    """List members in join order. Anonymous access only if enabled in settings."""
    if user_id is None and not settings.allow_anonymous_member_listing:
        raise AuthenticationRequiredError("Authentication required")
    rows = await member_service.list_members(orgName, user_id, session)
    return MemberListResponse(data=[_member_response(m, u) for m, u in rows])


@router.post("", response_model=MemberResponse, status_code=201, tags=["Members"])
async def add_member(
    orgName: str,
    body: MemberAddRequest,
    user_id: uuid.UUID = Depends(require_acting_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Add an existing user to the org (Owner or Admin)."""
    member, user = await member_service.add_member(orgName, body, user_id, session)
    return _member_response(member, user)


@router.patch("/{userId}", response_model=MemberResponse, tags=["Members"])
async def change_member_role(
    orgName: str,
    userId: uuid.UUID,
    body: MemberRoleUpdateRequest,
    user_id: uuid.UUID = Depends(require_acting_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Promote or demote a member."""
    member = await member_service.change_member_role(
        orgName, userId, body.role, acting_user_id=user_id, session=session
    )
    user = await UserStore(session).get_by_id(userId)
    return _member_response(member, user)


@router.delete("/{userId}", status_code=204, tags=["Members"])
async def remove_member(
    orgName: str,
    userId: uuid.UUID,
    user_id: uuid.UUID = Depends(require_acting_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Remove a member. Removing yourself is always allowed unless you are the last owner."""
    await member_service.remove_member(orgName, userId, acting_user_id=user_id, session=session)
    return Response(status_code=204)
