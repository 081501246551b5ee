"""create booking tables

Revision ID: 4a1c2e9d7b30
Revises:
Create Date: 2026-10-17 10:12:41.503118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4a1c2e9d7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Directory: shops, staff, services, customers
    op.create_table(
        'shops',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(100), nullable=True),
        sa.Column('region', sa.String(2), nullable=False, server_default='NW'),
        sa.Column('timezone', sa.String(50), nullable=False, server_default='Europe/Berlin'),
        sa.Column('currency', sa.String(3), nullable=False, server_default='EUR'),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_shops_tenant_id', 'shops', ['tenant_id'])
    op.create_index('ix_shops_slug', 'shops', ['slug'])
    op.create_index('ix_shops_is_active', 'shops', ['is_active'])

    op.create_table(
        'staff_members',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('shop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('shops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('free_day', sa.Integer(), nullable=True),
        sa.Column('sort_order', sa.Integer(), server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('free_day IS NULL OR (free_day >= 0 AND free_day <= 6)', name='ck_staff_free_day')
    )
    op.create_index('ix_staff_members_shop_id', 'staff_members', ['shop_id'])

    op.create_table(
        'services',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('shop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('shops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true')),
        sa.Column('display_order', sa.Integer(), server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_services_shop_id', 'services', ['shop_id'])
    op.create_index('ix_services_is_active', 'services', ['is_active'])

    op.create_table(
        'customers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('is_blocked', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_customers_email', 'customers', ['email'])

    # 2. Slot catalog and calendar rules
    op.create_table(
        'time_slots',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('shop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('shops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('time', sa.String(5), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.UniqueConstraint('shop_id', 'time', name='uq_time_slots_shop_time')
    )
    op.create_index('ix_time_slots_shop_id', 'time_slots', ['shop_id'])

    op.create_table(
        'opening_hours',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('shop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('shops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('is_closed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('open_time', sa.Time(), nullable=True),
        sa.Column('close_time', sa.Time(), nullable=True),
        sa.UniqueConstraint('shop_id', 'day_of_week', name='uq_opening_hours_shop_day'),
        sa.CheckConstraint('day_of_week >= 0 AND day_of_week <= 6', name='ck_opening_hours_day')
    )
    op.create_index('ix_opening_hours_shop_id', 'opening_hours', ['shop_id'])

    op.create_table(
        'closed_dates',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('shop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('shops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(), nullable=True),
        sa.UniqueConstraint('shop_id', 'date', name='uq_closed_dates_shop_date')
    )
    op.create_index('ix_closed_dates_shop_id', 'closed_dates', ['shop_id'])

    op.create_table(
        'open_sundays',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('shop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('shops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('open_time', sa.Time(), nullable=False),
        sa.Column('close_time', sa.Time(), nullable=False),
        sa.UniqueConstraint('shop_id', 'date', name='uq_open_sundays_shop_date')
    )
    op.create_index('ix_open_sundays_shop_id', 'open_sundays', ['shop_id'])

    op.create_table(
        'staff_time_off',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('staff_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('staff_members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(), nullable=True),
        sa.CheckConstraint('start_date <= end_date', name='ck_staff_time_off_range')
    )
    op.create_index('ix_staff_time_off_staff_id', 'staff_time_off', ['staff_id'])

    # 3. Recurring series
    op.create_table(
        'recurring_series',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('shop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('shops.id', ondelete='CASCADE'), nullable=False),
        sa.Column('staff_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('staff_members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('services.id', ondelete='SET NULL'), nullable=True),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('time_slot', sa.String(5), nullable=False),
        sa.Column('interval_type', sa.String(20), nullable=False, server_default='weekly'),
        sa.Column('interval_weeks', sa.Integer(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('customer_name', sa.String(200), nullable=False),
        sa.Column('customer_phone', sa.String(30), nullable=True),
        sa.Column('customer_email', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('day_of_week >= 1 AND day_of_week <= 7', name='ck_series_day_of_week'),
        sa.CheckConstraint('interval_weeks IS NULL OR interval_weeks >= 1', name='ck_series_interval_weeks')
    )
    op.create_index('ix_recurring_series_shop_id', 'recurring_series', ['shop_id'])
    op.create_index('ix_recurring_series_staff_id', 'recurring_series', ['staff_id'])

    op.create_table(
        'series_exceptions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('series_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('recurring_series.id', ondelete='CASCADE'), nullable=False),
        sa.Column('exception_date', sa.Date(), nullable=False),
        sa.Column('exception_type', sa.String(20), nullable=False, server_default='deleted'),
        sa.Column('reason', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.UniqueConstraint('series_id', 'exception_date', name='uq_series_exceptions_series_date')
    )
    op.create_index('ix_series_exceptions_series_id', 'series_exceptions', ['series_id'])

    # 4. Appointments
    op.create_table(
        'appointments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('shop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('shops.id'), nullable=False),
        sa.Column('staff_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('staff_members.id'), nullable=False),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('services.id'), nullable=True),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('customers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('series_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('recurring_series.id', ondelete='SET NULL'), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time_slot', sa.String(5), nullable=False),
        sa.Column('customer_name', sa.String(200), nullable=False),
        sa.Column('customer_phone', sa.String(30), nullable=True),
        sa.Column('customer_email', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='confirmed'),
        sa.Column('source', sa.String(20), nullable=False, server_default='online'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_by', sa.String(20), nullable=True)
    )

    # At most one non-cancelled appointment per (shop, staff, date, slot)
    op.create_index(
        'uq_appointments_active_slot',
        'appointments',
        ['shop_id', 'staff_id', 'date', 'time_slot'],
        unique=True,
        postgresql_where=sa.text("status != 'cancelled'")
    )
    op.create_index('idx_appointments_shop_date', 'appointments', ['shop_id', 'date'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_appointments_shop_date', table_name='appointments')
    op.drop_index('uq_appointments_active_slot', table_name='appointments')
    op.drop_table('appointments')

    op.drop_table('series_exceptions')
    op.drop_table('recurring_series')

    op.drop_table('staff_time_off')
    op.drop_table('open_sundays')
    op.drop_table('closed_dates')
    op.drop_table('opening_hours')
    op.drop_table('time_slots')

    op.drop_table('customers')
    op.drop_table('services')
    op.drop_table('staff_members')
    op.drop_table('shops')
