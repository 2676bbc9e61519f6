"""Fuzzy candidate index over organization names.

Built once per detection run from the full organization snapshot, then
queried with each contact's company name. The index holds only immutable
tuples, so one instance can be shared by any number of worker threads.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional
from uuid import UUID

from rapidfuzz import fuzz, process

from warmpath.schemas.relationships import OrganizationRecord
from warmpath.services.matching.normalizer import normalize_company_name, significant_tokens
from warmpath.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Lowest similarity (1 - distance) a candidate may have
SIMILARITY_FLOOR: float = 0.7

# Normalized names shorter than this are too generic to match on
MIN_QUERY_LENGTH: int = 3

# Tokens shorter than this don't count as shared words
MIN_TOKEN_LENGTH: int = 3


@dataclass(frozen=True)
class IndexedOrganization:
    """Organization with its precomputed comparison key."""

    organization_id: UUID
    name: str
    normalized_name: str
    tokens: frozenset[str]


@dataclass(frozen=True)
class Candidate:
    """Organization an input name resembles, with its similarity."""

    organization_id: UUID
    name: str
    similarity: float

    @property
    def distance(self) -> float:
        return 1.0 - self.similarity


@dataclass(frozen=True)
class CandidateIndex:
    """Immutable fuzzy index of normalized organization names.

    Attributes:
        entries: Matchable organizations in insertion order
        similarity_floor: Minimum similarity returned by ``query``
        min_query_length: Minimum normalized length of a query or entry
        choices: Normalized names aligned with ``entries``, handed to rapidfuzz
    """

    entries: tuple[IndexedOrganization, ...]
    similarity_floor: float = SIMILARITY_FLOOR
    min_query_length: int = MIN_QUERY_LENGTH
    choices: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self, "choices", tuple(entry.normalized_name for entry in self.entries)
        )

    @classmethod
    def build(
        cls,
        organizations: Iterable[OrganizationRecord],
        similarity_floor: float = SIMILARITY_FLOOR,
        min_query_length: int = MIN_QUERY_LENGTH,
    ) -> "CandidateIndex":
        """Normalize every organization name once and freeze the result.

        Organizations whose name normalizes to fewer than ``min_query_length``
        characters (e.g. a bare "LLC") are left out since no query could
        ever legitimately match them.
        """
        entries = []
        unmatchable = 0
        for organization in organizations:
            normalized = normalize_company_name(organization.name)
            if len(normalized) < min_query_length:
                unmatchable += 1
                continue
            entries.append(
                IndexedOrganization(
                    organization_id=organization.id,
                    name=organization.name,
                    normalized_name=normalized,
                    tokens=significant_tokens(normalized, MIN_TOKEN_LENGTH),
                )
            )

        LOGGER.info(
            f"Built candidate index with {len(entries)} organizations",
            extra={
                "indexed": len(entries),
                "unmatchable": unmatchable,
                "similarity_floor": similarity_floor,
            },
        )
        return cls(
            entries=tuple(entries),
            similarity_floor=similarity_floor,
            min_query_length=min_query_length,
        )

    def __len__(self) -> int:
        return len(self.entries)

    def query(self, raw_name: Optional[str]) -> list[Candidate]:
        """Find organizations whose name resembles ``raw_name``.

        Args:
            raw_name: Free-text company name, e.g. from an imported contact

        Returns:
            Candidates with similarity >= the floor, most similar first,
            ties ordered by organization id
        """
        normalized = normalize_company_name(raw_name)
        if len(normalized) < self.min_query_length or not self.entries:
            return []

        query_tokens = significant_tokens(normalized, MIN_TOKEN_LENGTH)
        if not query_tokens:
            return []

        matches = process.extract(
            normalized,
            self.choices,
            scorer=fuzz.token_sort_ratio,
            processor=None,
            score_cutoff=self.similarity_floor * 100,
            limit=None,
        )

        candidates = []
        for _, score, position in matches:
            entry = self.entries[position]
            # Unrounded so the works_at threshold sees the exact ratio
            similarity = score / 100.0
            if similarity < self.similarity_floor:
                continue
            # Require a shared word so "ser" never rides on "serve"
            if query_tokens.isdisjoint(entry.tokens):
                continue
            candidates.append(
                Candidate(
                    organization_id=entry.organization_id,
                    name=entry.name,
                    similarity=similarity,
                )
            )

        candidates.sort(key=lambda c: (-c.similarity, str(c.organization_id)))
        return candidates
