"""
User directory service: the identities members are resolved against.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, ForbiddenError, NotFoundError
from app.models.user import User
from app.repositories.memberships import MembershipStore
from app.repositories.organizations import OrganizationStore
from app.repositories.users import UserStore
from org_membership_shared.schemas.common import Role
from org_membership_shared.schemas.users import UserCreateRequest, UserUpdateRequest

log = structlog.get_logger()


async def create_user(req: UserCreateRequest, session: AsyncSession) -> User:
    users = UserStore(session)
    if await users.get_by_email(str(req.email)) is not None:
        raise ConflictError("A user with that email already exists")
    user = await users.create(name=req.name.strip(), email=str(req.email))
    log.info("user.created", user_id=str(user.id))
    return user


async def get_user(user_id: uuid.UUID, session: AsyncSession) -> User:
    user = await UserStore(session).get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def update_user(
    user_id: uuid.UUID,
    req: UserUpdateRequest,
    acting_user_id: uuid.UUID,
    session: AsyncSession,
) -> User:
    """Users may only edit their own record."""
    if acting_user_id != user_id:
        raise ForbiddenError("Users can only update their own profile")

    users = UserStore(session)
    if req.email is not None:
        existing = await users.get_by_email(str(req.email))
        if existing is not None and existing.id != user_id:
            raise ConflictError("A user with that email already exists")

    fields = req.model_dump(exclude_none=True)
    if "email" in fields:
        fields["email"] = str(fields["email"])
    user = await users.update(user_id, fields)
    log.info("user.updated", user_id=str(user_id))
    return user


async def delete_user(
    user_id: uuid.UUID, acting_user_id: uuid.UUID, session: AsyncSession
) -> None:
    """Delete a user and their memberships.

    Refused while the user is the only owner of any organization.
    """
    if acting_user_id != user_id:
        raise ForbiddenError("Users can only delete their own account")

    users = UserStore(session)
    if await users.get_by_id(user_id) is None:
        raise NotFoundError("User not found")

    members = MembershipStore(session)
    orgs = OrganizationStore(session)
    for org, role in await members.list_by_user(user_id):
        if role == Role.OWNER:
            await orgs.get_by_name(org.name, for_update=True)
            if await members.count_role(org.id, Role.OWNER) <= 1:
                raise ConflictError(
                    f"User is the last owner of organization '{org.name}'"
                )
        await members.remove(org.id, user_id)

    await users.delete(user_id)
    log.info("user.deleted", user_id=str(user_id))
