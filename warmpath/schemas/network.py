"""Pydantic schemas for warm-introduction network views."""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from warmpath.schemas.relationships import RelationshipType, StrengthLabel


class IntroPath(BaseModel):
    """Flattened relationship + contact view of one introduction path."""
    model_config = ConfigDict(from_attributes=True)

    contact_id: UUID
    contact_name: str
    contact_company: Optional[str] = None
    contact_position: Optional[str] = None
    team_member_name: str
    linkedin_url: Optional[str] = None

    relationship_type: RelationshipType
    path_strength: float = Field(..., ge=0.0, le=1.0)
    strength_label: StrengthLabel
    path_description: str = ""


class NetworkPath(BaseModel):
    """All introduction paths into one organization."""

    organization_id: UUID
    organization_name: str
    connections: List[IntroPath] = Field(default_factory=list)
    total_paths: int = 0
    strong_paths: int = 0
    medium_paths: int = 0
    weak_paths: int = 0


class NetworkOverviewItem(BaseModel):
    """Connection counts for one organization."""

    organization_id: UUID
    organization_name: str
    total_connections: int = 0
    strong_connections: int = 0
