"""User Store: the directory used to resolve invite targets."""

from __future__ import annotations

import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFoundError
from app.models.base import utcnow
from app.models.user import User


class UserStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, name: str, email: str) -> User:
        user = User(name=name, email=email)
        self._session.add(user)
        try:
            await self._session.flush()
        except IntegrityError:
            raise ConflictError("A user with that email already exists")
        return user

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalars().first()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def update(self, user_id: uuid.UUID, fields: dict[str, Any]) -> User:
        user = await self.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        for key in ("name", "email"):
            value = fields.get(key)
            if value is not None:
                setattr(user, key, value)
        user.updated_at = utcnow()
        self._session.add(user)
        try:
            await self._session.flush()
        except IntegrityError:
            raise ConflictError("A user with that email already exists")
        return user

    async def delete(self, user_id: uuid.UUID) -> None:
        user = await self.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        await self._session.delete(user)
        await self._session.flush()
