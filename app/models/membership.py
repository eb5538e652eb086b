"""Organization membership (organization x user, one role per pair)."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import UUIDMixin, utcnow


class OrganizationMember(UUIDMixin, SQLModel, table=True):
    __tablename__ = "organization_members"
    __table_args__ = (
        sa.UniqueConstraint("organization_id", "user_id", name="uq_organization_members_org_user"),
    )

    organization_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid,
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    # External identity; not a foreign key, the member may be unknown to the directory.
    user_id: uuid.UUID = Field(nullable=False, index=True)
    role: str = Field(nullable=False, max_length=16)  # owner | admin | member
    joined_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
    invited_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    invited_by: Optional[uuid.UUID] = None
