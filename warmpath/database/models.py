"""SQLAlchemy models for contacts, organizations and relationship edges."""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    TIMESTAMP,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from warmpath.core.database import Base

# Provenance tag for edges written by the company-name detector
COMPANY_MATCH = "company_match"


class Organization(Base):
    """Target firm a warm introduction path can lead into."""

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    relationships: Mapped[list["OrganizationRelationship"]] = relationship(
        "OrganizationRelationship",
        back_populates="organization",
        cascade="all, delete-orphan",
    )


class LinkedInContact(Base):
    """Imported professional contact owned by a team member."""

    __tablename__ = "linkedin_contacts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    linkedin_url: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    company: Mapped[str | None] = mapped_column(String, nullable=True)
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    normalized_company: Mapped[str | None] = mapped_column(String, nullable=True)
    connected_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    team_member_name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    relationships: Mapped[list["OrganizationRelationship"]] = relationship(
        "OrganizationRelationship",
        back_populates="contact",
        cascade="all, delete-orphan",
    )


class OrganizationRelationship(Base):
    """Scored, typed warm-introduction edge between a contact and a firm."""

    __tablename__ = "organization_relationships"
    __table_args__ = (
        UniqueConstraint("organization_id", "contact_id", name="uq_organization_contact"),
        CheckConstraint(
            "path_strength >= 0 AND path_strength <= 1",
            name="ck_path_strength_range",
        ),
        Index("ix_organization_relationships_detected_via", "detected_via"),
        Index("ix_organization_relationships_organization_id", "organization_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    contact_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("linkedin_contacts.id", ondelete="CASCADE"), nullable=False
    )
    relationship_type: Mapped[str] = mapped_column(String, nullable=False)
    path_strength: Mapped[float] = mapped_column(Float, nullable=False)
    path_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    detected_via: Mapped[str] = mapped_column(String, nullable=False, default=COMPANY_MATCH)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="relationships"
    )
    contact: Mapped["LinkedInContact"] = relationship(
        "LinkedInContact", back_populates="relationships"
    )
