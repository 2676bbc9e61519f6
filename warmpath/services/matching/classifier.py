"""Relationship type classification for matched contacts."""

from dataclasses import dataclass
from typing import Callable, Sequence

from warmpath.schemas.relationships import RelationshipType

# Similarity at which a contact with a current title is taken to work at the firm
WORKS_AT_THRESHOLD: float = 0.8

# Fallback when no rule applies; keeps classification total
DEFAULT_RELATIONSHIP_TYPE = RelationshipType.INDUSTRY_OVERLAP


@dataclass(frozen=True)
class MatchSignals:
    """Signals available when classifying one contact/organization match."""

    similarity: float
    has_current_position: bool


@dataclass(frozen=True)
class ClassificationRule:
    """Ordered decision-table row: first matching rule wins."""

    name: str
    relationship_type: RelationshipType
    applies: Callable[[MatchSignals], bool]


def default_rules(works_at_threshold: float = WORKS_AT_THRESHOLD) -> tuple[ClassificationRule, ...]:
    """Decision table for the signals currently available.

    former_colleague, knows_decision_maker and geographic_proximity have no
    rule yet; they need employment-history, shared-connection or location
    signals that imports don't carry.
    """
    return (
        ClassificationRule(
            name="titled_strong_name_match",
            relationship_type=RelationshipType.WORKS_AT,
            applies=lambda s: s.similarity >= works_at_threshold and s.has_current_position,
        ),
    )


class RelationshipClassifier:
    """Maps match signals to a relationship type through ordered rules."""

    def __init__(
        self,
        rules: Sequence[ClassificationRule] | None = None,
        default: RelationshipType = DEFAULT_RELATIONSHIP_TYPE,
    ):
        self.rules = tuple(rules) if rules is not None else default_rules()
        self.default = default

    def classify(self, similarity: float, has_current_position: bool) -> RelationshipType:
        signals = MatchSignals(similarity=similarity, has_current_position=has_current_position)
        for rule in self.rules:
            if rule.applies(signals):
                return rule.relationship_type
        return self.default


_DEFAULT_CLASSIFIER = RelationshipClassifier()


def classify_relationship(similarity: float, has_current_position: bool) -> RelationshipType:
    """Classify a match with the default decision table.

    Args:
        similarity: Name similarity in [0, 1]
        has_current_position: Whether the contact lists a current title

    Returns:
        works_at for a strong match on a titled contact, otherwise
        industry_overlap
    """
    return _DEFAULT_CLASSIFIER.classify(similarity, has_current_position)
