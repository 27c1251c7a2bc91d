"""Initial shuttle booking schema

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-19

Properties, trips, their associations, bookings and the jobs outbox.
Money as INTEGER CENTS.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # === PROPERTIES ===
    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(100), nullable=False),
        sa.Column('address', sa.String(255), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('state', sa.String(50), nullable=False),
        sa.Column('zip_code', sa.String(20), nullable=False),
        sa.Column('contact_phone', sa.String(50), nullable=True),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('meeting_point', sa.String(255), nullable=False),
    )
    op.create_index('ix_properties_slug', 'properties', ['slug'], unique=True)

    # === TRIPS ===
    op.create_table(
        'trips',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('departure_date', sa.DateTime(), nullable=False),
        sa.Column('return_date', sa.DateTime(), nullable=False),
        sa.Column('departure_time', sa.String(20), nullable=False),
        sa.Column('return_time', sa.String(20), nullable=False),
        sa.Column('max_capacity', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('price_per_seat', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('booking_close_hours', sa.Integer(), nullable=False, server_default='24'),
        sa.Column('departure_location', sa.String(255), nullable=False),
        sa.Column('return_location', sa.String(255), nullable=False),
        sa.CheckConstraint('max_capacity >= 1', name='ck_trips_max_capacity'),
        sa.CheckConstraint('price_per_seat >= 0', name='ck_trips_price_per_seat'),
    )
    op.create_index('ix_trips_departure_date', 'trips', ['departure_date'])

    # === PROPERTY <-> TRIP ===
    op.create_table(
        'property_trips',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('trip_id', sa.Integer(), sa.ForeignKey('trips.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('property_id', 'trip_id', name='uq_property_trips_property_trip'),
    )
    op.create_index('ix_property_trips_property_id', 'property_trips', ['property_id'])
    op.create_index('ix_property_trips_trip_id', 'property_trips', ['trip_id'])

    # === BOOKINGS ===
    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('trip_id', sa.Integer(), sa.ForeignKey('trips.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('customer_phone', sa.String(50), nullable=False),
        sa.Column('number_of_seats', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('total_amount', sa.Integer(), nullable=False),
        sa.Column('payment_ref', sa.String(255), nullable=True),
        sa.Column('payment_status', sa.Enum('pending', 'paid', 'refunded', name='paymentstatus'), nullable=False),
        sa.Column(
            'booking_status',
            sa.Enum('reserved', 'confirmed', 'cancelled', 'waitlist', name='bookingstatus'),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('number_of_seats >= 1', name='ck_bookings_number_of_seats'),
    )
    op.create_index('ix_bookings_trip_id', 'bookings', ['trip_id'])
    op.create_index('ix_bookings_property_id', 'bookings', ['property_id'])
    op.create_index('ix_bookings_payment_ref', 'bookings', ['payment_ref'])
    op.create_index('ix_bookings_payment_status', 'bookings', ['payment_status'])
    op.create_index('ix_bookings_booking_status', 'bookings', ['booking_status'])

    # === JOBS OUTBOX ===
    op.create_table(
        'jobs_outbox',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('pending', 'processing', 'completed', 'failed', name='jobstatus'),
            nullable=False,
        ),
        sa.Column('unique_scope', sa.String(500), nullable=False, unique=True),
        sa.Column('attempts', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('last_error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_jobs_outbox_type', 'jobs_outbox', ['type'])
    op.create_index('ix_jobs_outbox_status', 'jobs_outbox', ['status'])


def downgrade() -> None:
    op.drop_table('jobs_outbox')
    op.drop_table('bookings')
    op.drop_table('property_trips')
    op.drop_table('trips')
    op.drop_table('properties')
    sa.Enum(name='jobstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='bookingstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='paymentstatus').drop(op.get_bind(), checkfirst=True)
