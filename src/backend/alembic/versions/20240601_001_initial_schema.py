"""Initial schema - projects, vendor assignments, APM phases

Revision ID: 001_initial
Revises:
Create Date: 2024-06-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    ]


def upgrade() -> None:
    # Create projects table
    op.create_table(
        'projects',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('project_name', sa.String(255), nullable=False),
        sa.Column('project_address', sa.String(500), nullable=True),
        sa.Column('general_contractor', sa.String(255), nullable=True),
        sa.Column('project_description', sa.Text, nullable=True),
        sa.Column('due_date', sa.Date, nullable=True),
        sa.Column('estimated_value', sa.Numeric(15, 2), nullable=True),
        sa.Column('archived', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('archived_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('on_hold', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('on_hold_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sent_to_apm', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('sent_to_apm_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('apm_archived', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('apm_archived_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('apm_on_hold', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('apm_on_hold_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('NOT (archived AND on_hold)', name='ck_projects_general_exclusive'),
        sa.CheckConstraint('NOT (apm_archived AND apm_on_hold)', name='ck_projects_apm_exclusive'),
    )
    op.create_index('ix_projects_project_name', 'projects', ['project_name'])
    op.create_index('ix_projects_archived', 'projects', ['archived'])
    op.create_index('ix_projects_on_hold', 'projects', ['on_hold'])
    op.create_index('ix_projects_sent_to_apm', 'projects', ['sent_to_apm'])

    # Create project_vendors table
    op.create_table(
        'project_vendors',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('project_id', sa.Integer, sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('vendor_id', sa.Integer, nullable=False),
        sa.Column('closeout_received_date', sa.Date, nullable=True),
        sa.Column('apm_phase', sa.String(30), nullable=True),
        sa.Column('next_follow_up_date', sa.Date, nullable=True),
        sa.Column('buy_number_follow_up_date', sa.Date, nullable=True),
        sa.Column('po_follow_up_date', sa.Date, nullable=True),
        sa.Column('submittals_follow_up_date', sa.Date, nullable=True),
        sa.Column('revised_plans_follow_up_date', sa.Date, nullable=True),
        sa.Column('equipment_release_follow_up_date', sa.Date, nullable=True),
        sa.Column('closeout_follow_up_date', sa.Date, nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_project_vendors_project_id', 'project_vendors', ['project_id'])
    op.create_index('ix_project_vendors_vendor_id', 'project_vendors', ['vendor_id'])

    # Create apm_phases table
    op.create_table(
        'apm_phases',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('project_vendor_id', sa.Integer, sa.ForeignKey('project_vendors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('phase_name', sa.String(100), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='Pending'),
        sa.Column('sort_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('requested_date', sa.Date, nullable=True),
        sa.Column('follow_up_date', sa.Date, nullable=True),
        sa.Column('received_date', sa.Date, nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_apm_phases_project_vendor_id', 'apm_phases', ['project_vendor_id'])
    op.create_index('ix_apm_phases_follow_up_date', 'apm_phases', ['follow_up_date'])


def downgrade() -> None:
    op.drop_table('apm_phases')
    op.drop_table('project_vendors')
    op.drop_table('projects')
