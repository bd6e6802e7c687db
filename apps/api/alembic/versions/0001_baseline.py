"""Baseline migration - forms, submissions, stencils and jobs

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-18

Portable column types so the same schema runs on PostgreSQL and SQLite.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create pipeline tables."""

    # ==========================================================================
    # Forms & notifications
    # ==========================================================================
    op.create_table(
        'forms',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('handle', sa.String(100), nullable=False, unique=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('settings', sa.JSON(), nullable=False),
        sa.Column('fields', sa.JSON(), nullable=False),
        sa.Column('require_user', sa.Boolean(), nullable=False),
        sa.Column('availability', sa.String(20), nullable=False),
        sa.Column('availability_from', sa.DateTime(timezone=True), nullable=True),
        sa.Column('availability_to', sa.DateTime(timezone=True), nullable=True),
        sa.Column('availability_submissions', sa.Integer(), nullable=True),
        sa.Column('user_deleted_action', sa.String(20), nullable=False),
        sa.Column('file_uploads_action', sa.String(20), nullable=False),
        sa.Column('data_retention', sa.String(20), nullable=False, server_default='forever'),
        sa.Column('data_retention_value', sa.Integer(), nullable=True),
        sa.Column('template_id', sa.Uuid(), nullable=True),
        sa.Column('default_status_id', sa.Uuid(), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_forms_data_retention', 'forms', ['data_retention'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('form_id', sa.Uuid(), sa.ForeignKey('forms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('recipient', sa.Text(), nullable=False),
        sa.Column('subject', sa.Text(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('conditions', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_notifications_form', 'notifications', ['form_id', 'sort_order'])

    # ==========================================================================
    # Integrations
    # ==========================================================================
    op.create_table(
        'integrations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('handle', sa.String(100), nullable=False, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False),
        sa.Column('settings', sa.JSON(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'form_integrations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('form_id', sa.Uuid(), sa.ForeignKey('forms.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'integration_id',
            sa.Uuid(),
            sa.ForeignKey('integrations.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('enabled', sa.Boolean(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('settings', sa.JSON(), nullable=False),
        sa.UniqueConstraint('form_id', 'integration_id', name='uq_form_integration'),
    )

    # ==========================================================================
    # Submissions
    # ==========================================================================
    op.create_table(
        'submissions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('form_id', sa.Uuid(), sa.ForeignKey('forms.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column('is_incomplete', sa.Boolean(), nullable=False),
        sa.Column('is_spam', sa.Boolean(), nullable=False),
        sa.Column('spam_reason', sa.Text(), nullable=True),
        sa.Column('field_values', sa.JSON(), nullable=False),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('idx_submissions_form_created', 'submissions', ['form_id', 'created_at'])
    op.create_index('idx_submissions_incomplete', 'submissions', ['is_incomplete', 'updated_at'])
    op.create_index('idx_submissions_spam', 'submissions', ['is_spam', 'created_at'])
    op.create_index('idx_submissions_user', 'submissions', ['user_id'])

    # ==========================================================================
    # Stencils & project config
    # ==========================================================================
    op.create_table(
        'stencils',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('uid', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('handle', sa.String(100), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('template_id', sa.Uuid(), nullable=True),
        sa.Column('default_status_id', sa.Uuid(), nullable=True),
        sa.Column('submit_action_entry_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('idx_stencils_handle', 'stencils', ['handle'])
    op.create_index('uq_stencils_uid', 'stencils', ['uid'], unique=True)

    op.create_table(
        'project_config',
        sa.Column('path', sa.String(255), primary_key=True),
        sa.Column('value', sa.JSON(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    # ==========================================================================
    # Jobs
    # ==========================================================================
    op.create_table(
        'jobs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('job_type', sa.String(50), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('run_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_attempts', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('last_error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('idempotency_key', sa.String(255), nullable=True),
    )
    op.create_index('idx_jobs_pending', 'jobs', ['status', 'run_at'])
    op.create_index('uq_job_idempotency', 'jobs', ['idempotency_key'], unique=True)


def downgrade() -> None:
    """Drop pipeline tables."""
    for table in (
        'jobs',
        'project_config',
        'stencils',
        'submissions',
        'form_integrations',
        'integrations',
        'notifications',
        'forms',
    ):
        op.drop_table(table)
