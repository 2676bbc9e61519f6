"""Repository for contact-to-organization relationship edges."""

from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from warmpath.core.exceptions import ConfigurationError, RelationshipPersistenceError
from warmpath.database.models import LinkedInContact, Organization, OrganizationRelationship
from warmpath.repositories.base_repository import BaseRepository
from warmpath.schemas.relationships import DetectedVia, EdgeWriteResult, RelationshipEdgeCreate

DEFAULT_BATCH_SIZE = 500


class RelationshipRepository(BaseRepository[OrganizationRelationship]):
    """Repository for managing OrganizationRelationship records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, OrganizationRelationship)

    def _insert_ignoring_pair_conflicts(self, rows: List[dict]):
        """INSERT ... ON CONFLICT (organization_id, contact_id) DO NOTHING."""
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise ConfigurationError(
                f"Conflict-tolerant insert not supported for dialect '{dialect}'"
            )

        return (
            insert(OrganizationRelationship)
            .values(rows)
            .on_conflict_do_nothing(index_elements=["organization_id", "contact_id"])
        )

    async def delete_by_detected_via(self, detected_via: DetectedVia) -> int:
        """Delete every edge with the given provenance and commit.

        Raises:
            RelationshipPersistenceError: If the delete fails
        """
        try:
            stmt = delete(OrganizationRelationship).where(
                OrganizationRelationship.detected_via == detected_via.value
            )
            result = await self.session.execute(stmt)
            await self.session.commit()
            deleted = result.rowcount or 0
            self.logger.info(
                f"Deleted {deleted} '{detected_via.value}' relationships",
                extra={"detected_via": detected_via.value, "deleted": deleted},
            )
            return deleted
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error(
                f"Error deleting '{detected_via.value}' relationships: {e}",
                exc_info=True,
            )
            raise RelationshipPersistenceError(
                f"Could not clear previously detected relationships: {e}", original_error=e
            )

    async def insert_batch(self, edges: Sequence[RelationshipEdgeCreate]) -> int:
        """Insert one batch in its own transaction.

        Pairs that already exist are skipped by the database.

        Returns:
            Number of rows actually inserted
        """
        if not edges:
            return 0
        stmt = self._insert_ignoring_pair_conflicts([edge.to_row() for edge in edges])
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount if result.rowcount is not None and result.rowcount >= 0 else len(edges)

    async def replace_detected_edges(
        self,
        edges: Sequence[RelationshipEdgeCreate],
        batch_size: int = DEFAULT_BATCH_SIZE,
        detected_via: DetectedVia = DetectedVia.COMPANY_MATCH,
        replace_existing: bool = True,
    ) -> EdgeWriteResult:
        """Replace the auto-detected edge set with ``edges``.

        Deletes every edge carrying ``detected_via`` (edges with any other
        provenance are untouched), then inserts the new set in bounded
        batches. A failing batch is rolled back, logged and dropped; later
        batches still run.

        Args:
            edges: Deduplicated edge set from the edge builder
            batch_size: Rows per insert statement
            detected_via: Provenance tag owned by the caller
            replace_existing: When False, skip the delete and rely on the
                pair uniqueness constraint alone

        Returns:
            EdgeWriteResult with deleted/stored/conflict/failure counts
        """
        result = EdgeWriteResult()
        if replace_existing:
            result.deleted = await self.delete_by_detected_via(detected_via)

        batch_size = max(1, batch_size)
        total_batches = (len(edges) + batch_size - 1) // batch_size

        for batch_number, start in enumerate(range(0, len(edges), batch_size), start=1):
            batch = edges[start:start + batch_size]
            try:
                inserted = await self.insert_batch(batch)
            except SQLAlchemyError as e:
                await self.session.rollback()
                result.failed_batches += 1
                result.storage_errors += len(batch)
                self.logger.error(
                    f"Relationship batch {batch_number}/{total_batches} failed: {e}",
                    exc_info=True,
                    extra={"batch_number": batch_number, "batch_size": len(batch)},
                )
                continue

            result.stored += inserted
            result.conflicts_ignored += len(batch) - inserted
            self.logger.debug(
                f"Stored relationship batch {batch_number}/{total_batches}",
                extra={"inserted": inserted, "batch_size": len(batch)},
            )

        self.logger.info(
            f"Stored {result.stored}/{len(edges)} relationships",
            extra=result.model_dump(),
        )
        return result

    async def get_by_organization(
        self, organization_id: UUID, limit: Optional[int] = None
    ) -> Sequence[tuple[OrganizationRelationship, LinkedInContact]]:
        """Edges into an organization with their contacts, strongest first."""
        query = (
            select(OrganizationRelationship, LinkedInContact)
            .join(LinkedInContact, OrganizationRelationship.contact_id == LinkedInContact.id)
            .where(OrganizationRelationship.organization_id == organization_id)
            .order_by(
                OrganizationRelationship.path_strength.desc(),
                LinkedInContact.full_name,
                LinkedInContact.id,
            )
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return result.tuples().all()

    async def get_connection_counts(
        self, strong_threshold: float
    ) -> Sequence[tuple[UUID, str, int, int]]:
        """Per active organization: (id, name, total edges, strong edges)."""
        strong = func.count(OrganizationRelationship.id).filter(
            OrganizationRelationship.path_strength >= strong_threshold
        )
        query = (
            select(
                Organization.id,
                Organization.name,
                func.count(OrganizationRelationship.id),
                strong,
            )
            .outerjoin(
                OrganizationRelationship,
                OrganizationRelationship.organization_id == Organization.id,
            )
            .where(Organization.deleted_at.is_(None))
            .group_by(Organization.id, Organization.name)
        )
        result = await self.session.execute(query)
        return result.tuples().all()
