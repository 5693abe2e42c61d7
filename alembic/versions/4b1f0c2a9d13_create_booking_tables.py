"""create booking tables

Revision ID: 4b1f0c2a9d13
Revises:
Create Date: 2026-10-18 09:12:41.507213

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4b1f0c2a9d13'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Businesses
    op.create_table(
        'businesses',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('owner_id', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('timezone', sa.String(50), nullable=True, server_default='UTC'),
        sa.Column('subscription_tier', sa.String(20), nullable=False, server_default='starter'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('is_active', sa.Boolean, server_default=sa.text('true'))
    )
    op.create_index('ix_businesses_owner_id', 'businesses', ['owner_id'])
    op.create_index('ix_businesses_slug', 'businesses', ['slug'], unique=True)

    # 2. Services
    op.create_table(
        'services',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('duration', sa.Integer, nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('is_active', sa.Boolean, server_default=sa.text('true')),
        sa.Column('requires_confirmation', sa.Boolean, nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_services_business_id', 'services', ['business_id'])
    op.create_index('ix_services_is_active', 'services', ['is_active'])

    # 3. Business hours, one row per weekday
    op.create_table(
        'availability_rules',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer, nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('is_open', sa.Boolean, nullable=False, server_default=sa.text('true')),
        sa.Column('slot_duration', sa.Integer, nullable=False, server_default='30'),
        sa.Column('max_bookings_per_slot', sa.Integer, nullable=False, server_default='1'),
        sa.UniqueConstraint('business_id', 'day_of_week', name='uq_availability_business_day')
    )
    op.create_index('ix_availability_rules_business_id', 'availability_rules', ['business_id'])

    # 4. Blocked time
    op.create_table(
        'blocked_times',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_datetime', sa.DateTime, nullable=False),
        sa.Column('end_datetime', sa.DateTime, nullable=False),
        sa.Column('reason', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_blocked_times_business_id', 'blocked_times', ['business_id'])

    # 5. Team members with their services and schedules
    op.create_table(
        'team_members',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('role', sa.String(100), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_team_members_business_id', 'team_members', ['business_id'])

    op.create_table(
        'team_member_services',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('team_member_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('team_members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('team_member_id', 'service_id', name='uq_team_member_service')
    )
    op.create_index('ix_team_member_services_team_member_id', 'team_member_services', ['team_member_id'])
    op.create_index('ix_team_member_services_service_id', 'team_member_services', ['service_id'])

    op.create_table(
        'team_member_availability',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('team_member_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('team_members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer, nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('is_available', sa.Boolean, nullable=False, server_default=sa.text('true')),
        sa.UniqueConstraint('team_member_id', 'day_of_week', name='uq_team_member_day')
    )
    op.create_index('ix_team_member_availability_team_member_id', 'team_member_availability', ['team_member_id'])

    # 6. Bookings
    op.create_table(
        'bookings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
        sa.Column('team_member_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('team_members.id', ondelete='SET NULL'), nullable=True),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('customer_phone', sa.String(50), nullable=True),
        sa.Column('customer_notes', sa.Text, nullable=True),
        sa.Column('booking_date', sa.Date, nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('internal_notes', sa.Text, nullable=True),
        sa.Column('cancellation_reason', sa.Text, nullable=True),
        sa.Column('customer_action_token', sa.String(64), nullable=False),
        sa.Column('proposed_booking_date', sa.Date, nullable=True),
        sa.Column('proposed_start_time', sa.String(5), nullable=True),
        sa.Column('proposed_end_time', sa.String(5), nullable=True),
        sa.Column('modification_reason', sa.Text, nullable=True),
        sa.Column('modification_token', sa.String(64), nullable=True),
        sa.Column('modification_token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status_before_modification', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('idx_bookings_business_date', 'bookings', ['business_id', 'booking_date'])
    op.create_index('ix_bookings_customer_action_token', 'bookings', ['customer_action_token'], unique=True)
    op.create_index('ix_bookings_modification_token', 'bookings', ['modification_token'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('bookings')
    op.drop_table('team_member_availability')
    op.drop_table('team_member_services')
    op.drop_table('team_members')
    op.drop_table('blocked_times')
    op.drop_table('availability_rules')
    op.drop_table('services')
    op.drop_table('businesses')
