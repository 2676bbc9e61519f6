"""Read model over stored relationship edges for ranking and overview views."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from warmpath.core.exceptions import OrganizationNotFoundError
from warmpath.database.models import LinkedInContact, OrganizationRelationship
from warmpath.repositories.organization_repository import OrganizationRepository
from warmpath.repositories.relationship_repository import RelationshipRepository
from warmpath.schemas.network import IntroPath, NetworkOverviewItem, NetworkPath
from warmpath.schemas.relationships import RelationshipType, StrengthLabel
from warmpath.services.matching.scorer import STRONG_THRESHOLD, classify_strength
from warmpath.utils.logging import get_logger

LOGGER = get_logger(__name__)


def to_intro_path(relationship: OrganizationRelationship, contact: LinkedInContact) -> IntroPath:
    """Flatten a stored edge and its contact into an IntroPath."""
    return IntroPath(
        contact_id=contact.id,
        contact_name=contact.full_name,
        contact_company=contact.company,
        contact_position=contact.position,
        team_member_name=contact.team_member_name,
        linkedin_url=contact.linkedin_url,
        relationship_type=RelationshipType(relationship.relationship_type),
        path_strength=relationship.path_strength,
        strength_label=classify_strength(relationship.path_strength),
        path_description=relationship.path_description or "",
    )


class NetworkService:
    """Service answering "who can introduce us to this firm?" questions."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.organization_repo = OrganizationRepository(session)
        self.relationship_repo = RelationshipRepository(session)

    async def _require_organization(self, organization_id: UUID):
        organization = await self.organization_repo.get_active(organization_id)
        if organization is None:
            raise OrganizationNotFoundError(f"Organization {organization_id} not found")
        return organization

    async def get_network_graph(self, organization_id: UUID) -> NetworkPath:
        """All introduction paths into an organization, strongest first.

        Raises:
            OrganizationNotFoundError: If the organization is unknown or deleted
        """
        organization = await self._require_organization(organization_id)
        rows = await self.relationship_repo.get_by_organization(organization_id)
        connections = [to_intro_path(relationship, contact) for relationship, contact in rows]

        labels = [c.strength_label for c in connections]
        network = NetworkPath(
            organization_id=organization.id,
            organization_name=organization.name,
            connections=connections,
            total_paths=len(connections),
            strong_paths=labels.count(StrengthLabel.STRONG),
            medium_paths=labels.count(StrengthLabel.MEDIUM),
            weak_paths=labels.count(StrengthLabel.WEAK),
        )
        LOGGER.debug(
            f"Loaded {network.total_paths} intro paths for {organization.name}",
            extra={"organization_id": str(organization_id)},
        )
        return network

    async def get_best_intro_path(self, organization_id: UUID) -> Optional[IntroPath]:
        """The single strongest introduction path, or None when there is none."""
        await self._require_organization(organization_id)
        rows = await self.relationship_repo.get_by_organization(organization_id, limit=1)
        if not rows:
            return None
        relationship, contact = rows[0]
        return to_intro_path(relationship, contact)

    async def get_network_overview(self) -> List[NetworkOverviewItem]:
        """Connection counts per organization, most strong connections first."""
        rows = await self.relationship_repo.get_connection_counts(STRONG_THRESHOLD)
        overview = [
            NetworkOverviewItem(
                organization_id=organization_id,
                organization_name=name,
                total_connections=total or 0,
                strong_connections=strong or 0,
            )
            for organization_id, name, total, strong in rows
        ]
        overview.sort(key=lambda item: (-item.strong_connections, item.organization_name))
        return overview
