from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warmpath.database.models import Organization
from warmpath.repositories.base_repository import BaseRepository
from warmpath.schemas.relationships import OrganizationRecord


class OrganizationRepository(BaseRepository[Organization]):
    """Repository for reading target organizations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Organization)

    async def get_active(self, id: UUID) -> Optional[Organization]:
        """Get an organization unless it has been soft-deleted."""
        organization = await self.get_by_id(id)
        if organization is None or organization.deleted_at is not None:
            return None
        return organization

    async def get_detection_snapshot(self) -> List[OrganizationRecord]:
        """Load the current, non-deleted organization set for one run."""
        query = (
            select(Organization.id, Organization.name)
            .where(Organization.deleted_at.is_(None))
            .order_by(Organization.id)
        )
        result = await self.session.execute(query)
        return [OrganizationRecord.model_validate(row._asdict()) for row in result]
