"""
Organization service: organization lifecycle under role checks.

Every function runs inside the caller's session; the session's transaction
is the atomic unit (see app.core.database.get_session).
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
from app.models.organization import Organization
from app.repositories.memberships import MembershipStore
from app.repositories.organizations import OrganizationStore
from app.services import roles
from org_membership_shared.schemas.common import Role
from org_membership_shared.schemas.organizations import (
    OrgCreateRequest,
    OrgUpdateRequest,
)

log = structlog.get_logger()


async def create_org(
    req: OrgCreateRequest,
    founder_id: uuid.UUID,
    session: AsyncSession,
) -> Organization:
    """Create an org and make the founder its first owner, atomically."""
    if not req.name.strip():
        raise ValidationFailedError("Organization name must not be empty")

    orgs = OrganizationStore(session)
    if await orgs.get_by_name(req.name) is not None:
        raise ConflictError(f"Organization with name '{req.name}' already exists")

    # Two concurrent creates can both pass the check above; the unique index
    # on organizations.name rejects the loser and the store maps it to ConflictError.
    org = await orgs.create(
        name=req.name,
        display_name=req.display_name,
        description=req.description,
        website_url=req.website_url,
    )
    await MembershipStore(session).insert(org.id, founder_id, Role.OWNER)

    log.info("org.created", org_id=str(org.id), org=org.name, founder=str(founder_id))
    return org


async def get_org(name: str, session: AsyncSession) -> Organization:
    """Public read; raises NotFoundError if the org does not exist."""
    org = await OrganizationStore(session).get_by_name(name)
    if org is None:
        raise NotFoundError("Organization not found")
    return org


async def get_member_role(
    org: Organization, user_id: Optional[uuid.UUID], session: AsyncSession
) -> Optional[Role]:
    if user_id is None:
        return None
    return await MembershipStore(session).get_role(org.id, user_id)


async def update_org(
    name: str,
    req: OrgUpdateRequest,
    acting_user_id: uuid.UUID,
    session: AsyncSession,
) -> Organization:
    """Patch metadata (owners and admins)."""
    orgs = OrganizationStore(session)
    org = await orgs.get_by_name(name, for_update=True)
    if org is None:
        raise NotFoundError("Organization not found")

    role = await get_member_role(org, acting_user_id, session)
    if role is None or not roles.can_manage_organization(role):
        raise ForbiddenError("Insufficient permissions to update organization")

    org = await orgs.update(name, req.model_dump(exclude_none=True))
    log.info("org.updated", org=name, actor=str(acting_user_id))
    return org


async def delete_org(
    name: str, acting_user_id: uuid.UUID, session: AsyncSession
) -> None:
    """Delete an org and every membership in it (owners only)."""
    orgs = OrganizationStore(session)
    org = await orgs.get_by_name(name, for_update=True)
    if org is None:
        raise NotFoundError("Organization not found")

    role = await get_member_role(org, acting_user_id, session)
    if role is None or not roles.can_delete_organization(role):
        raise ForbiddenError("Only organization owners can delete organizations")

    await orgs.delete(name)
    log.info("org.deleted", org_id=str(org.id), org=name, actor=str(acting_user_id))


async def list_user_orgs(
    user_id: uuid.UUID, session: AsyncSession
) -> list[tuple[Organization, Role]]:
    """List all orgs a user belongs to, with their role, ordered by name."""
    return await MembershipStore(session).list_by_user(user_id)
