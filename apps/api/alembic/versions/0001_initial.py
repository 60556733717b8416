"""Initial schema - users, matters, referrals, notifications

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

Creates every table for settlement tracking: users and OTP codes,
matters with tasks and documents, referrals and payouts, organisations,
notification templates and logs, and playbook articles.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]
    if updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return columns


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Users
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('external_id', sa.String(255), unique=True, nullable=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='CLIENT'),
        sa.Column('avatar_url', sa.String(500), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('state', sa.String(10), nullable=True),
        sa.Column('postcode', sa.String(10), nullable=True),
        sa.Column('onboarding_step', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('onboarding_complete', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('voi_method', sa.String(50), nullable=True),
        sa.Column('voi_status', sa.String(20), nullable=False, server_default='not_started'),
        sa.Column('voi_session_id', sa.String(255), nullable=True),
        sa.Column('two_factor_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('two_factor_verified_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'otp_codes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('code_hash', sa.String(64), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(updated=False),
    )
    op.create_index('idx_otp_codes_user_created', 'otp_codes', ['user_id', 'created_at'])

    # ==========================================================================
    # Matters, tasks, documents
    # ==========================================================================
    op.create_table(
        'matters',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('client_user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('conveyancer_user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('broker_user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('referral_id', sa.Uuid(), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, server_default='Draft'),
        sa.Column('transaction_type', sa.String(50), nullable=True),
        sa.Column('pillar_pre_settlement', sa.String(20), nullable=False, server_default='not_started'),
        sa.Column('pillar_exchange', sa.String(20), nullable=False, server_default='not_started'),
        sa.Column('pillar_conditions', sa.String(20), nullable=False, server_default='not_started'),
        sa.Column('pillar_pre_completion', sa.String(20), nullable=False, server_default='not_started'),
        sa.Column('pillar_settlement', sa.String(20), nullable=False, server_default='not_started'),
        sa.Column('settlement_date', sa.Date(), nullable=True),
        sa.Column('cooling_off_date', sa.Date(), nullable=True),
        sa.Column('finance_date', sa.Date(), nullable=True),
        sa.Column('contract_price_cents', sa.Integer(), nullable=True),
        sa.Column('deposit_amount_cents', sa.Integer(), nullable=True),
        sa.Column('deposit_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('smokeball_matter_id', sa.String(100), nullable=True),
        sa.Column('pexa_workspace_id', sa.String(100), nullable=True),
        sa.Column('last_active_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_matters_client', 'matters', ['client_user_id'])
    op.create_index('idx_matters_conveyancer', 'matters', ['conveyancer_user_id'])
    op.create_index('idx_matters_broker', 'matters', ['broker_user_id'])
    op.create_index('ix_matters_referral_id', 'matters', ['referral_id'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('matter_id', sa.Uuid(), sa.ForeignKey('matters.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('pillar', sa.String(50), nullable=True),
        sa.Column('assigned_to_user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_tasks_matter_status', 'tasks', ['matter_id', 'status'])

    op.create_table(
        'documents',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('matter_id', sa.Uuid(), sa.ForeignKey('matters.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('size_label', sa.String(50), nullable=True),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('uploaded_by_user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('locked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('file_key', sa.String(500), unique=True, nullable=True),
        sa.Column('file_url', sa.Text(), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_documents_matter', 'documents', ['matter_id'])

    # ==========================================================================
    # Referrals and payouts
    # ==========================================================================
    op.create_table(
        'referrals',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('broker_user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('client_name', sa.String(255), nullable=False),
        sa.Column('client_email', sa.String(255), nullable=True),
        sa.Column('client_phone', sa.String(50), nullable=True),
        sa.Column('property_address', sa.String(500), nullable=True),
        sa.Column('transaction_type', sa.String(50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('channel', sa.String(20), nullable=False, server_default='PORTAL'),
        sa.Column('status', sa.String(20), nullable=False, server_default='Pending'),
        sa.Column('commission_cents', sa.Integer(), nullable=True),
        sa.Column('qr_token', sa.String(64), unique=True, nullable=True),
        sa.Column('matter_id', sa.Uuid(), sa.ForeignKey('matters.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_referrals_broker_created', 'referrals', ['broker_user_id', 'created_at'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('referral_id', sa.Uuid(), sa.ForeignKey('referrals.id', ondelete='SET NULL'), nullable=True),
        sa.Column('matter_id', sa.Uuid(), sa.ForeignKey('matters.id', ondelete='SET NULL'), nullable=True),
        sa.Column('broker_user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('gross_amount_cents', sa.Integer(), nullable=False),
        sa.Column('platform_fee_cents', sa.Integer(), nullable=False),
        sa.Column('net_amount_cents', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('settled_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index('idx_payments_broker', 'payments', ['broker_user_id'])

    # ==========================================================================
    # Organisations
    # ==========================================================================
    op.create_table(
        'organisations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(50), nullable=False, server_default='BROKERAGE'),
        *_timestamps(updated=False),
    )

    op.create_table(
        'organisation_members',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('organisation_id', sa.Uuid(), sa.ForeignKey('organisations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='MEMBER'),
        *_timestamps(updated=False),
        sa.UniqueConstraint('organisation_id', 'user_id', name='uq_organisation_member'),
    )

    # ==========================================================================
    # Notifications
    # ==========================================================================
    op.create_table(
        'notification_templates',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('channel', sa.String(10), nullable=False),
        sa.Column('trigger', sa.String(50), nullable=False),
        sa.Column('subject', sa.String(255), nullable=True),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('idx_notification_templates_trigger', 'notification_templates', ['trigger', 'channel'])

    op.create_table(
        'notification_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('template_id', sa.Uuid(), sa.ForeignKey('notification_templates.id', ondelete='SET NULL'), nullable=True),
        sa.Column('recipient_user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('matter_id', sa.Uuid(), sa.ForeignKey('matters.id', ondelete='SET NULL'), nullable=True),
        sa.Column('channel', sa.String(10), nullable=False),
        sa.Column('trigger', sa.String(50), nullable=True),
        sa.Column('subject', sa.String(255), nullable=True),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('status', sa.String(10), nullable=False),
        sa.Column('error', sa.Text(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index('idx_notification_logs_created', 'notification_logs', ['created_at'])

    # ==========================================================================
    # Playbook
    # ==========================================================================
    op.create_table(
        'playbook_articles',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('slug', sa.String(150), unique=True, nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('summary', sa.String(500), nullable=True),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('pillar', sa.String(50), nullable=True),
        sa.Column('reading_minutes', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('published', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(updated=False),
    )


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        'playbook_articles',
        'notification_logs',
        'notification_templates',
        'organisation_members',
        'organisations',
        'payments',
        'referrals',
        'documents',
        'tasks',
        'matters',
        'otp_codes',
        'users',
    ):
        op.drop_table(table)
