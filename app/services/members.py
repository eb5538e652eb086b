"""
Membership service: invite, role change and removal under the role policy.

Mutations lock the organization row before reading any role, so two
concurrent requests against the same organization see each other's writes
instead of a stale role. After every demotion or removal the number of
owners is re-counted in the same transaction; an operation that would leave
the organization without an owner fails with ConflictError and is rolled back.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)
from app.models.membership import OrganizationMember
from app.models.organization import Organization
from app.models.user import User
from app.repositories.memberships import MembershipStore
from app.repositories.organizations import OrganizationStore
from app.repositories.users import UserStore
from app.services import roles
from org_membership_shared.schemas.common import Role
from org_membership_shared.schemas.members import MemberAddRequest

log = structlog.get_logger()


async def _lock_org(name: str, session: AsyncSession) -> Organization:
    org = await OrganizationStore(session).get_by_name(name, for_update=True)
    if org is None:
        raise NotFoundError("Organization not found")
    return org


async def _ensure_owner_remains(org: Organization, members: MembershipStore) -> None:
    if await members.count_role(org.id, Role.OWNER) == 0:
        raise ConflictError(
            "Organization must keep at least one owner; "
            "promote another owner first or delete the organization"
        )


async def list_members(
    name: str,
    acting_user_id: Optional[uuid.UUID],
    session: AsyncSession,
) -> list[tuple[OrganizationMember, Optional[User]]]:
    """List members in join order.

    An identified caller must be a member. ``acting_user_id=None`` is the
    anonymous read; whether it is allowed is the HTTP layer's decision.
    """
    orgs = OrganizationStore(session)
    org = await orgs.get_by_name(name)
    if org is None:
        raise NotFoundError("Organization not found")

    members = MembershipStore(session)
    if acting_user_id is not None:
        if await members.get_role(org.id, acting_user_id) is None:
            raise ForbiddenError("Access denied: not a member of this organization")

    return await members.list_with_users(org.id)


async def add_member(
    name: str,
    req: MemberAddRequest,
    inviter_id: uuid.UUID,
    session: AsyncSession,
) -> tuple[OrganizationMember, User]:
    """Add an existing user to the org with the requested role."""
    if req.email is None and req.user_id is None:
        raise ValidationFailedError("Either email or user_id is required")

    org = await _lock_org(name, session)
    members = MembershipStore(session)

    inviter_role = await members.get_role(org.id, inviter_id)
    if inviter_role is None or not roles.can_manage_members(inviter_role):
        raise ForbiddenError("Insufficient permissions to add members")
    if not roles.can_change_role_to(inviter_role, req.role):
        raise ForbiddenError("Insufficient permissions to assign this role")

    users = UserStore(session)
    if req.user_id is not None:
        user = await users.get_by_id(req.user_id)
    else:
        user = await users.get_by_email(str(req.email))
    if user is None:
        raise NotFoundError("User not found")

    if await members.get_role(org.id, user.id) is not None:
        raise ConflictError("User is already a member of this organization")

    member = await members.insert(org.id, user.id, req.role, invited_by=inviter_id)
    log.info(
        "member.added",
        org=name,
        user_id=str(user.id),
        role=req.role.value,
        actor=str(inviter_id),
    )
    return member, user


async def change_member_role(
    name: str,
    target_user_id: uuid.UUID,
    new_role: Role,
    acting_user_id: uuid.UUID,
    session: AsyncSession,
) -> OrganizationMember:
    """Change a member's role.

    The actor must be allowed to assign ``new_role`` and to touch the
    target at their current role.
    """
    org = await _lock_org(name, session)
    members = MembershipStore(session)

    acting_role = await members.get_role(org.id, acting_user_id)
    target_role = await members.get_role(org.id, target_user_id)
    if acting_role is None or target_role is None:
        raise ForbiddenError("Invalid member or insufficient permissions")
    if not roles.can_change_role_to(acting_role, new_role):
        raise ForbiddenError("Insufficient permissions to assign this role")
    if not roles.can_remove_member(acting_role, target_role):
        raise ForbiddenError("Insufficient permissions to modify this member")

    member = await members.update_role(org.id, target_user_id, new_role)
    if target_role == Role.OWNER and new_role != Role.OWNER:
        await _ensure_owner_remains(org, members)

    log.info(
        "member.role_changed",
        org=name,
        user_id=str(target_user_id),
        old_role=target_role.value,
        role=new_role.value,
        actor=str(acting_user_id),
    )
    return member


async def remove_member(
    name: str,
    target_user_id: uuid.UUID,
    acting_user_id: uuid.UUID,
    session: AsyncSession,
) -> None:
    """Remove a member. Anyone may remove themself (leave)."""
    org = await _lock_org(name, session)
    members = MembershipStore(session)

    target_role = await members.get_role(org.id, target_user_id)
    if acting_user_id != target_user_id:
        acting_role = await members.get_role(org.id, acting_user_id)
        if acting_role is None or target_role is None:
            raise ForbiddenError("Invalid member or insufficient permissions")
        if not roles.can_remove_member(acting_role, target_role):
            raise ForbiddenError("Insufficient permissions to remove this member")

    await members.remove(org.id, target_user_id)
    if target_role == Role.OWNER:
        await _ensure_owner_remains(org, members)

    log.info(
        "member.removed",
        org=name,
        user_id=str(target_user_id),
        actor=str(acting_user_id),
        self_removal=acting_user_id == target_user_id,
    )
