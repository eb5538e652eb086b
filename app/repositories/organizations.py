"""Organization Store: persistence for organization records, keyed by name."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFoundError
from app.models.base import utcnow
from app.models.membership import OrganizationMember
from app.models.organization import Organization

# Metadata columns a patch may touch. name is immutable.
MUTABLE_FIELDS = ("display_name", "description", "website_url", "avatar_url")


class OrganizationStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        name: str,
        display_name: Optional[str] = None,
        description: Optional[str] = None,
        website_url: Optional[str] = None,
    ) -> Organization:
        """Insert an organization. Raises ConflictError if the name is taken."""
        org = Organization(
            name=name,
            display_name=display_name,
            description=description,
            website_url=website_url,
        )
        self._session.add(org)
        try:
            await self._session.flush()
        except IntegrityError:
            raise ConflictError(f"Organization with name '{name}' already exists")
        return org

    async def get_by_name(self, name: str, *, for_update: bool = False) -> Optional[Organization]:
        """Return the organization or None.

        ``for_update`` takes a row lock, serializing membership mutations in
        the same organization until the transaction ends.
        """
        stmt = select(Organization).where(Organization.name == name)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return result.scalars().first()

    async def update(self, name: str, fields: dict[str, Any]) -> Organization:
        """Patch metadata; None or missing values leave the column unchanged."""
        org = await self.get_by_name(name, for_update=True)
        if org is None:
            raise NotFoundError("Organization not found")

        for key in MUTABLE_FIELDS:
            value = fields.get(key)
            if value is not None:
                setattr(org, key, value)
        org.updated_at = utcnow()
        self._session.add(org)
        await self._session.flush()
        return org

    async def delete(self, name: str) -> None:
        """Delete an organization and all of its memberships."""
        org = await self.get_by_name(name, for_update=True)
        if org is None:
            raise NotFoundError("Organization not found")

        await self._session.execute(
            delete(OrganizationMember).where(OrganizationMember.organization_id == org.id)
        )
        await self._session.delete(org)
        await self._session.flush()
