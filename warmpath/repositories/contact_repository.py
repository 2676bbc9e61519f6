from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warmpath.database.models import LinkedInContact
from warmpath.repositories.base_repository import BaseRepository
from warmpath.schemas.relationships import ContactRecord


class ContactRepository(BaseRepository[LinkedInContact]):
    """Repository for reading imported LinkedIn contacts."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, LinkedInContact)

    async def get_detection_inputs(self) -> List[ContactRecord]:
        """Load every contact as a typed, immutable detector input.

        Returns:
            Contacts ordered by id so repeated runs see the same sequence
        """
        query = select(
            LinkedInContact.id,
            LinkedInContact.full_name,
            LinkedInContact.company,
            LinkedInContact.position,
            LinkedInContact.connected_on,
            LinkedInContact.team_member_name,
        ).order_by(LinkedInContact.id)
        result = await self.session.execute(query)
        return [ContactRecord.model_validate(row._asdict()) for row in result]
