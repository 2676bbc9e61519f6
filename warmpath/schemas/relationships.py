"""Pydantic schemas for relationship detection inputs, edges and run results."""

from datetime import date
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from warmpath.utils.dates import parse_connection_date


# =====================================================
# Taxonomy
# =====================================================

class RelationshipType(str, Enum):
    """Kind of introduction path a contact provides into a firm."""
    WORKS_AT = "works_at"  # Contact currently works at the firm
    FORMER_COLLEAGUE = "former_colleague"  # Contact used to work there
    KNOWS_DECISION_MAKER = "knows_decision_maker"  # Contact knows a decision maker
    INDUSTRY_OVERLAP = "industry_overlap"  # Same industry or related company
    GEOGRAPHIC_PROXIMITY = "geographic_proximity"  # Same geography


class StrengthLabel(str, Enum):
    """Coarse bucket of a path strength used for display badges."""
    STRONG = "strong"
    MEDIUM = "medium"
    WEAK = "weak"


class DetectedVia(str, Enum):
    """Provenance of a relationship edge."""
    COMPANY_MATCH = "company_match"  # Fuzzy matched via company name
    MANUAL = "manual"  # Entered by a user
    EMAIL_MATCH = "email_match"
    NAME_MATCH = "name_match"


# =====================================================
# Engine inputs (resolved once at the data-access boundary)
# =====================================================

class ContactRecord(BaseModel):
    """Immutable view of an imported contact as seen by the detector."""
    model_config = ConfigDict(frozen=True, from_attributes=True, populate_by_name=True)

    id: UUID
    full_name: str = ""
    company: Optional[str] = None
    position: Optional[str] = None
    connected_on: Optional[date] = None
    owner: str = Field(
        default="",
        validation_alias=AliasChoices("owner", "team_member_name"),
        description="Team member who owns the connection",
    )

    @field_validator("connected_on", mode="before")
    @classmethod
    def _lenient_connected_on(cls, value: Any) -> Optional[date]:
        # Unparseable dates degrade to "unknown" instead of rejecting the contact
        return parse_connection_date(value)

    @property
    def has_current_position(self) -> bool:
        return bool(self.position and self.position.strip())


class OrganizationRecord(BaseModel):
    """Immutable view of a target organization."""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    name: str


# =====================================================
# Engine outputs
# =====================================================

class RelationshipEdgeCreate(BaseModel):
    """Relationship edge ready to be inserted."""
    model_config = ConfigDict(frozen=True)

    organization_id: UUID
    contact_id: UUID
    relationship_type: RelationshipType
    path_strength: float = Field(..., ge=0.0, le=1.0)
    path_description: str
    detected_via: DetectedVia = DetectedVia.COMPANY_MATCH

    @property
    def pair(self) -> tuple[UUID, UUID]:
        return (self.organization_id, self.contact_id)

    def to_row(self) -> Dict[str, Any]:
        """Column mapping for a bulk insert."""
        return {
            "organization_id": self.organization_id,
            "contact_id": self.contact_id,
            "relationship_type": self.relationship_type.value,
            "path_strength": self.path_strength,
            "path_description": self.path_description,
            "detected_via": self.detected_via.value,
        }


class EdgeWriteResult(BaseModel):
    """Outcome of a best-effort batched edge write."""

    deleted: int = 0
    stored: int = 0
    conflicts_ignored: int = 0
    failed_batches: int = 0
    storage_errors: int = 0

    @property
    def partial(self) -> bool:
        return self.failed_batches > 0


class DetectionRunResult(BaseModel):
    """Summary reported by one detection run."""

    contacts_processed: int = 0
    contacts_skipped: int = 0
    organizations_indexed: int = 0
    relationships_detected: int = 0
    relationships_stored: int = 0
    relationships_replaced: int = 0
    conflicts_ignored: int = 0
    failed_batches: int = 0
    storage_errors: int = 0
    strength_breakdown: Dict[StrengthLabel, int] = Field(default_factory=dict)
