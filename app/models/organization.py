"""Organization model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Organization(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organizations"

    name: str = Field(unique=True, nullable=False, index=True, max_length=50)
    display_name: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    website_url: Optional[str] = None
    avatar_url: Optional[str] = None
