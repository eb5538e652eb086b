"""
Membership Store: persistence for (organization, user) membership rows.

Roles are stored as plain text; this module is the only place that converts
between the column value and the Role enum.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFoundError
from app.models.base import utcnow
from app.models.membership import OrganizationMember
from app.models.organization import Organization
from app.models.user import User
from org_membership_shared.schemas.common import Role


class MembershipStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _get(self, org_id: uuid.UUID, user_id: uuid.UUID) -> Optional[OrganizationMember]:
        result = await self._session.execute(
            select(OrganizationMember).where(
                OrganizationMember.organization_id == org_id,
                OrganizationMember.user_id == user_id,
            )
        )
        return result.scalars().first()

    async def list_by_organization(self, org_id: uuid.UUID) -> list[OrganizationMember]:
        """Members in join order (oldest first)."""
        result = await self._session.execute(
            select(OrganizationMember)
            .where(OrganizationMember.organization_id == org_id)
            .order_by(OrganizationMember.joined_at.asc(), OrganizationMember.id.asc())
        )
        return list(result.scalars().all())

    async def list_with_users(
        self, org_id: uuid.UUID
    ) -> list[tuple[OrganizationMember, Optional[User]]]:
        """Same ordering as list_by_organization, with directory info when known."""
        result = await self._session.execute(
            select(OrganizationMember, User)
            .outerjoin(User, User.id == OrganizationMember.user_id)
            .where(OrganizationMember.organization_id == org_id)
            .order_by(OrganizationMember.joined_at.asc(), OrganizationMember.id.asc())
        )
        return [(member, user) for member, user in result.all()]

    async def list_by_user(self, user_id: uuid.UUID) -> list[tuple[Organization, Role]]:
        """Organizations the user belongs to, ordered by organization name."""
        result = await self._session.execute(
            select(Organization, OrganizationMember.role)
            .join(OrganizationMember, OrganizationMember.organization_id == Organization.id)
            .where(OrganizationMember.user_id == user_id)
            .order_by(Organization.name.asc())
        )
        return [(org, Role(role)) for org, role in result.all()]

    async def get_role(self, org_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Role]:
        result = await self._session.execute(
            select(OrganizationMember.role).where(
                OrganizationMember.organization_id == org_id,
                OrganizationMember.user_id == user_id,
            )
        )
        role = result.scalar_one_or_none()
        return Role(role) if role is not None else None

    async def count_role(self, org_id: uuid.UUID, role: Role) -> int:
        result = await self._session.execute(
            select(func.count())
            .select_from(OrganizationMember)
            .where(
                OrganizationMember.organization_id == org_id,
                OrganizationMember.role == role.value,
            )
        )
        return result.scalar_one()

    async def insert(
        self,
        org_id: uuid.UUID,
        user_id: uuid.UUID,
        role: Role,
        invited_by: Optional[uuid.UUID] = None,
    ) -> OrganizationMember:
        """Create a membership. Raises ConflictError if the pair already exists."""
        member = OrganizationMember(
            organization_id=org_id,
            user_id=user_id,
            role=role.value,
            invited_at=utcnow() if invited_by is not None else None,
            invited_by=invited_by,
        )
        self._session.add(member)
        try:
            await self._session.flush()
        except IntegrityError:
            raise ConflictError("User is already a member of this organization")
        return member

    async def update_role(
        self, org_id: uuid.UUID, user_id: uuid.UUID, new_role: Role
    ) -> OrganizationMember:
        member = await self._get(org_id, user_id)
        if member is None:
            raise NotFoundError("Member not found")
        member.role = new_role.value
        self._session.add(member)
        await self._session.flush()
        return member

    async def remove(self, org_id: uuid.UUID, user_id: uuid.UUID) -> None:
        member = await self._get(org_id, user_id)
        if member is None:
            raise NotFoundError("Member not found")
        await self._session.delete(member)
        await self._session.flush()
