"""add organizations, linkedin contacts and organization relationships

Revision ID: 7c1e2a9d4b30
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '7c1e2a9d4b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('deleted_at', sa.TIMESTAMP(timezone=True), nullable=True,
                  comment='Soft delete marker; deleted firms are never matched'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'linkedin_contacts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('first_name', sa.String(), nullable=False, server_default=''),
        sa.Column('last_name', sa.String(), nullable=False, server_default=''),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('linkedin_url', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('company', sa.String(), nullable=True),
        sa.Column('position', sa.String(), nullable=True),
        sa.Column('normalized_company', sa.String(), nullable=True,
                  comment='Lowercased company name with legal suffixes removed'),
        sa.Column('connected_on', sa.Date(), nullable=True),
        sa.Column('team_member_name', sa.String(), nullable=False,
                  comment='Team member who owns this connection'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'organization_relationships',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('contact_id', sa.Uuid(), nullable=False),
        sa.Column('relationship_type', sa.String(), nullable=False,
                  comment='works_at, former_colleague, knows_decision_maker, industry_overlap, geographic_proximity'),
        sa.Column('path_strength', sa.Float(), nullable=False,
                  comment='0.0-1.0, higher is a warmer introduction path'),
        sa.Column('path_description', sa.Text(), nullable=True),
        sa.Column('detected_via', sa.String(), nullable=False, server_default='company_match',
                  comment='company_match, manual, email_match, name_match'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['contact_id'], ['linkedin_contacts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('organization_id', 'contact_id', name='uq_organization_contact'),
        sa.CheckConstraint('path_strength >= 0 AND path_strength <= 1', name='ck_path_strength_range'),
    )

    op.create_index('ix_organization_relationships_detected_via', 'organization_relationships', ['detected_via'])
    op.create_index('ix_organization_relationships_organization_id', 'organization_relationships', ['organization_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_organization_relationships_organization_id', table_name='organization_relationships')
    op.drop_index('ix_organization_relationships_detected_via', table_name='organization_relationships')
    op.drop_table('organization_relationships')
    op.drop_table('linkedin_contacts')
    op.drop_table('organizations')
