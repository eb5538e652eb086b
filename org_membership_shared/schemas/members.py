"""Membership schemas: invite, role change, member listing."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, model_validator

from .common import Role


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class MemberAddRequest(BaseModel):
    """Add a user to the org (direct invite). Identify the user by email or id."""
    email: Optional[EmailStr] = None
    user_id: Optional[uuid.UUID] = None
    role: Role = Role.MEMBER

    @model_validator(mode="after")
    def _one_target(self) -> "MemberAddRequest":
        if (self.email is None) == (self.user_id is None):
            raise ValueError("Exactly one of 'email' or 'user_id' is required")
        return self


class MemberRoleUpdateRequest(BaseModel):
    role: Role


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class MemberResponse(BaseModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    user_id: uuid.UUID
    role: Role
    joined_at: datetime
    invited_at: Optional[datetime] = None
    invited_by: Optional[uuid.UUID] = None
    name: Optional[str] = None
    email: Optional[str] = None

    model_config = {"from_attributes": True}


class MemberListResponse(BaseModel):
    data: List[MemberResponse]
