"""
User directory endpoints.

POST   /api/v1/users            — Register a user
GET    /api/v1/users/{userId}   — Get a user
PATCH  /api/v1/users/{userId}   — Update own profile
DELETE /api/v1/users/{userId}   — Delete own account
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import require_acting_user_id
from app.core.database import get_session
from app.services import users as user_service
from org_membership_shared.schemas.users import (
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=201, tags=["Users"])
async def create_user(
    body: UserCreateRequest,
    session: AsyncSession = Depends(get_session),
):
    user = await user_service.create_user(body, session)
    return UserResponse.model_validate(user)


@router.get("/{userId}", response_model=UserResponse, tags=["Users"])
async def get_user(
    userId: uuid.UUID,
    session: AsyncSession = Depends(get_session),
):
    user = await user_service.get_user(userId, session)
    return UserResponse.model_validate(user)


@router.patch("/{userId}", response_model=UserResponse, tags=["Users"])
async def update_user(
    userId: uuid.UUID,
    body: UserUpdateRequest,
    acting_user_id: uuid.UUID = Depends(require_acting_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Update name or email (self only)."""
    user = await user_service.update_user(userId, body, acting_user_id, session)
    return UserResponse.model_validate(user)


@router.delete("/{userId}", status_code=204, tags=["Users"])
async def delete_user(
    userId: uuid.UUID,
    acting_user_id: uuid.UUID = Depends(require_acting_user_id),
    session: AsyncSession = Depends(get_session),
):
    """Delete own account and memberships."""
    await user_service.delete_user(userId, acting_user_id, session)
    return Response(status_code=204)
