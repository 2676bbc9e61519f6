"""Assembles classified, scored matches into relationship edges."""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Iterable, Optional, Sequence
from uuid import UUID

from warmpath.schemas.relationships import (
    ContactRecord,
    DetectedVia,
    RelationshipEdgeCreate,
    RelationshipType,
)
from warmpath.services.matching.candidate_index import Candidate, CandidateIndex
from warmpath.services.matching.classifier import RelationshipClassifier
from warmpath.services.matching.scorer import calculate_path_strength
from warmpath.utils.logging import get_logger

LOGGER = get_logger(__name__)

RELATIONSHIP_LABELS: dict[RelationshipType, str] = {
    RelationshipType.WORKS_AT: "currently works at",
    RelationshipType.FORMER_COLLEAGUE: "formerly worked at",
    RelationshipType.KNOWS_DECISION_MAKER: "knows decision maker at",
    RelationshipType.INDUSTRY_OVERLAP: "has industry connection to",
    RelationshipType.GEOGRAPHIC_PROXIMITY: "is geographically near",
}


def format_connection_date(connected_on: Optional[date]) -> str:
    """Render a connection date like "Feb 10, 2026"."""
    if connected_on is None:
        return "Date unknown"
    return f"{connected_on.strftime('%b')} {connected_on.day}, {connected_on.year}"


def build_path_description(
    contact: ContactRecord,
    firm_name: str,
    relationship_type: RelationshipType,
) -> str:
    """Human-readable explanation of an introduction path."""
    name = contact.full_name.strip() or "Unknown contact"
    position = (contact.position or "").strip() or "Position unknown"
    company = (contact.company or "").strip() or "Company unknown"
    owner = contact.owner.strip() or "Unknown team member"
    label = RELATIONSHIP_LABELS[relationship_type]
    since = format_connection_date(contact.connected_on)
    return f"{name} ({position}) at {company} - {label} {firm_name}. Known to {owner} since {since}."


class RelationshipEdgeBuilder:
    """Builds the engine-generated edge set for one detection run.

    The index and classifier are read-only, so contacts may be processed on
    several threads at once; results are reassembled in input order.
    """

    def __init__(
        self,
        index: CandidateIndex,
        classifier: Optional[RelationshipClassifier] = None,
        as_of: Optional[date] = None,
        max_workers: int = 1,
    ):
        """Initialize edge builder.

        Args:
            index: Candidate index built from the organization snapshot
            classifier: Relationship classifier; default decision table when omitted
            as_of: Reference day for recency scoring, fixed for the whole run
            max_workers: Threads used to shard contacts (1 = inline)
        """
        self.index = index
        self.classifier = classifier or RelationshipClassifier()
        self.as_of = as_of or date.today()
        self.max_workers = max(1, max_workers)

    def edges_for_contact(self, contact: ContactRecord) -> list[RelationshipEdgeCreate]:
        """Classify, score and describe every candidate for one contact."""
        if not contact.company or not contact.company.strip():
            return []

        return [
            self._build_edge(contact, candidate)
            for candidate in self.index.query(contact.company)
        ]

    def _build_edge(self, contact: ContactRecord, candidate: Candidate) -> RelationshipEdgeCreate:
        relationship_type = self.classifier.classify(
            candidate.similarity, contact.has_current_position
        )
        return RelationshipEdgeCreate(
            organization_id=candidate.organization_id,
            contact_id=contact.id,
            relationship_type=relationship_type,
            path_strength=calculate_path_strength(
                relationship_type, contact.connected_on, as_of=self.as_of
            ),
            path_description=build_path_description(contact, candidate.name, relationship_type),
            detected_via=DetectedVia.COMPANY_MATCH,
        )

    def _shards(self, contacts: Sequence[ContactRecord]) -> list[Sequence[ContactRecord]]:
        size = max(1, -(-len(contacts) // self.max_workers))
        return [contacts[i:i + size] for i in range(0, len(contacts), size)]

    def _build_shard(self, shard: Sequence[ContactRecord]) -> list[list[RelationshipEdgeCreate]]:
        return [self.edges_for_contact(contact) for contact in shard]

    def build(self, contacts: Iterable[ContactRecord]) -> list[RelationshipEdgeCreate]:
        """Build deduplicated edges for all contacts.

        Args:
            contacts: Contacts to evaluate; those without a company are skipped

        Returns:
            At most one edge per (organization_id, contact_id); when a pair is
            produced twice the stronger edge is kept
        """
        contacts = list(contacts)
        if not contacts or not len(self.index):
            return []

        if self.max_workers > 1 and len(contacts) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                per_contact = [
                    edges
                    for shard_result in executor.map(self._build_shard, self._shards(contacts))
                    for edges in shard_result
                ]
        else:
            per_contact = self._build_shard(contacts)

        deduplicated: dict[tuple[UUID, UUID], RelationshipEdgeCreate] = {}
        duplicates = 0
        for edges in per_contact:
            for edge in edges:
                existing = deduplicated.get(edge.pair)
                if existing is None:
                    deduplicated[edge.pair] = edge
                    continue
                duplicates += 1
                if edge.path_strength > existing.path_strength:
                    deduplicated[edge.pair] = edge

        skipped = sum(1 for c in contacts if not (c.company and c.company.strip()))
        LOGGER.info(
            f"Built {len(deduplicated)} relationship edges from {len(contacts)} contacts",
            extra={
                "contacts": len(contacts),
                "contacts_without_company": skipped,
                "edges": len(deduplicated),
                "duplicate_pairs": duplicates,
                "workers": self.max_workers,
            },
        )
        return list(deduplicated.values())


def build_relationship_edges(
    contacts: Iterable[ContactRecord],
    index: CandidateIndex,
    classifier: Optional[RelationshipClassifier] = None,
    as_of: Optional[date] = None,
    max_workers: int = 1,
) -> list[RelationshipEdgeCreate]:
    """Convenience wrapper around ``RelationshipEdgeBuilder.build``."""
    builder = RelationshipEdgeBuilder(index, classifier=classifier, as_of=as_of, max_workers=max_workers)
    return builder.build(contacts)
