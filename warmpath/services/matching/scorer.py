"""Path strength scoring for detected relationships.

Final strength = min(base strength of the relationship type * recency
multiplier, 1.0). Strength labels bucket the score for display.
"""

from datetime import date
from typing import Any, Optional

from warmpath.schemas.relationships import RelationshipType, StrengthLabel
from warmpath.utils.dates import parse_connection_date

BASE_PATH_STRENGTHS: dict[RelationshipType, float] = {
    RelationshipType.WORKS_AT: 1.0,
    RelationshipType.FORMER_COLLEAGUE: 0.7,
    RelationshipType.KNOWS_DECISION_MAKER: 0.6,
    RelationshipType.INDUSTRY_OVERLAP: 0.3,
    RelationshipType.GEOGRAPHIC_PROXIMITY: 0.2,
}

# (exclusive upper bound in days, multiplier); older connections use the last value
RECENCY_BANDS: tuple[tuple[int, float], ...] = (
    (30, 1.2),
    (90, 1.0),
    (365, 0.9),
)
STALE_MULTIPLIER: float = 0.8
NEUTRAL_MULTIPLIER: float = 1.0

STRONG_THRESHOLD: float = 0.7
MEDIUM_THRESHOLD: float = 0.4


def recency_multiplier(connected_on: Any, as_of: Optional[date] = None) -> float:
    """Recency multiplier for a connection date.

    Missing or unparseable dates get the neutral multiplier. Dates in the
    future count as brand new.
    """
    connected = parse_connection_date(connected_on)
    if connected is None:
        return NEUTRAL_MULTIPLIER

    days_ago = ((as_of or date.today()) - connected).days
    for upper_bound, multiplier in RECENCY_BANDS:
        if days_ago < upper_bound:
            return multiplier
    return STALE_MULTIPLIER


def calculate_path_strength(
    relationship_type: RelationshipType,
    connected_on: Any = None,
    as_of: Optional[date] = None,
) -> float:
    """Calculate path strength with the recency multiplier applied.

    Args:
        relationship_type: Classified relationship type
        connected_on: When the connection was made (date or date string)
        as_of: Reference day for recency; today when omitted

    Returns:
        Strength in [0.0, 1.0], rounded to 4 decimals
    """
    base_strength = BASE_PATH_STRENGTHS[RelationshipType(relationship_type)]
    strength = base_strength * recency_multiplier(connected_on, as_of)
    return round(min(max(strength, 0.0), 1.0), 4)


def classify_strength(score: float) -> StrengthLabel:
    """Bucket a path strength; each band includes its lower bound."""
    if score >= STRONG_THRESHOLD:
        return StrengthLabel.STRONG
    if score >= MEDIUM_THRESHOLD:
        return StrengthLabel.MEDIUM
    return StrengthLabel.WEAK
