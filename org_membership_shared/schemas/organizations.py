"""
Organization-related Pydantic schemas shared between server and clients.

Covers: Org create/update requests and org responses.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import Role

ORG_NAME_PATTERN = r"^[a-z0-9][a-z0-9-]*[a-z0-9]$"
URL_PATTERN = r"^https?://"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class OrgCreateRequest(BaseModel):
    name: str = Field(
        ...,
        min_length=2,
        max_length=50,
        pattern=ORG_NAME_PATTERN,
        description="Unique, immutable URL-safe org identifier",
    )
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    website_url: Optional[str] = Field(None, max_length=2048, pattern=URL_PATTERN)


class OrgUpdateRequest(BaseModel):
    """Partial update. Absent or null fields keep their current value."""

    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    website_url: Optional[str] = Field(None, max_length=2048, pattern=URL_PATTERN)
    avatar_url: Optional[str] = Field(None, max_length=2048, pattern=URL_PATTERN)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class OrgResponse(BaseModel):
    id: uuid.UUID
    name: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    website_url: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OrgListItem(OrgResponse):
    role: Role  # the requesting user's role in this org


class OrgListResponse(BaseModel):
    data: list[OrgListItem]
