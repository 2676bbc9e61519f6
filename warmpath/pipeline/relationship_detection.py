"""Relationship detection pipeline.

One run: snapshot organizations, build the candidate index, match every
contact, then replace the stored auto-detected edge set.
"""

import asyncio
from collections import Counter
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from warmpath.core.config import DetectionSettings, settings
from warmpath.core.exceptions import RelationshipDetectionError
from warmpath.repositories.contact_repository import ContactRepository
from warmpath.repositories.organization_repository import OrganizationRepository
from warmpath.repositories.relationship_repository import RelationshipRepository
from warmpath.schemas.relationships import DetectedVia, DetectionRunResult
from warmpath.services.matching.candidate_index import CandidateIndex
from warmpath.services.matching.classifier import RelationshipClassifier, default_rules
from warmpath.services.matching.edge_builder import RelationshipEdgeBuilder
from warmpath.services.matching.scorer import classify_strength
from warmpath.utils.logging import get_logger

LOGGER = get_logger(__name__)


class RelationshipDetectionPipeline:
    """Runs contact-to-organization relationship detection end to end.

    Runs using the full-replace strategy must not overlap; the Temporal
    workflow that schedules them uses a fixed workflow id for that.
    """

    def __init__(self, session: AsyncSession, config: Optional[DetectionSettings] = None):
        self.session = session
        self.config = config or settings.detection
        self.contact_repo = ContactRepository(session)
        self.organization_repo = OrganizationRepository(session)
        self.relationship_repo = RelationshipRepository(session)

    async def run(
        self,
        as_of: Optional[date] = None,
        replace_existing: bool = True,
    ) -> DetectionRunResult:
        """Detect and store relationships for the current snapshot.

        Args:
            as_of: Reference day for recency scoring; today when omitted
            replace_existing: Delete the previous auto-detected set first

        Returns:
            DetectionRunResult summarising detection and storage

        Raises:
            RelationshipDetectionError: If the input snapshot cannot be loaded
            RelationshipPersistenceError: If the previous edge set cannot be cleared
        """
        as_of = as_of or date.today()

        try:
            organizations = await self.organization_repo.get_detection_snapshot()
            contacts = await self.contact_repo.get_detection_inputs()
        except SQLAlchemyError as e:
            LOGGER.error(f"Failed to load detection inputs: {e}", exc_info=True)
            raise RelationshipDetectionError(
                f"Could not load contacts and organizations: {e}", original_error=e
            )

        LOGGER.info(
            f"Starting relationship detection for {len(contacts)} contacts "
            f"against {len(organizations)} organizations",
            extra={
                "contacts": len(contacts),
                "organizations": len(organizations),
                "as_of": as_of.isoformat(),
            },
        )

        index = CandidateIndex.build(
            organizations,
            similarity_floor=self.config.similarity_floor,
            min_query_length=self.config.min_query_length,
        )
        builder = RelationshipEdgeBuilder(
            index,
            classifier=RelationshipClassifier(default_rules(self.config.works_at_threshold)),
            as_of=as_of,
            max_workers=self.config.max_workers,
        )
        # Fuzzy matching is CPU-bound; keep it off the event loop
        edges = await asyncio.to_thread(builder.build, contacts)

        write = await self.relationship_repo.replace_detected_edges(
            edges,
            batch_size=self.config.batch_size,
            detected_via=DetectedVia.COMPANY_MATCH,
            replace_existing=replace_existing,
        )

        breakdown = Counter(classify_strength(edge.path_strength) for edge in edges)
        result = DetectionRunResult(
            contacts_processed=len(contacts),
            contacts_skipped=sum(1 for c in contacts if not (c.company and c.company.strip())),
            organizations_indexed=len(index),
            relationships_detected=len(edges),
            relationships_stored=write.stored,
            relationships_replaced=write.deleted,
            conflicts_ignored=write.conflicts_ignored,
            failed_batches=write.failed_batches,
            storage_errors=write.storage_errors,
            strength_breakdown=dict(breakdown),
        )

        log = LOGGER.warning if write.partial else LOGGER.info
        log(
            f"Relationship detection finished: {result.relationships_detected} detected, "
            f"{result.relationships_stored} stored, {result.storage_errors} storage errors",
            extra={
                "relationships_detected": result.relationships_detected,
                "relationships_stored": result.relationships_stored,
                "failed_batches": result.failed_batches,
            },
        )
        return result
