"""User model (directory of known identities)."""

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    name: str = Field(nullable=False, max_length=255)
    email: str = Field(unique=True, nullable=False, index=True, max_length=255)
