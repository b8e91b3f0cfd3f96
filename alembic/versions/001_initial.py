"""Initial schema - users, rooms, bookings

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19
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
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=True),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='guest'),
        sa.Column('status', sa.String(20), nullable=False, server_default='Verified'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'rooms',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('location', sa.String(200), nullable=True),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(500), nullable=True),
        sa.Column('guests', sa.Integer(), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=True),
        sa.Column('bathrooms', sa.Integer(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('host_email', sa.String(255), nullable=False),
        sa.Column('host_name', sa.String(100), nullable=True),
        sa.Column('host_image', sa.String(500), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='Available'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_rooms_category', 'rooms', ['category'])
    op.create_index('ix_rooms_host_email', 'rooms', ['host_email'])
    op.create_index('ix_room_host_status', 'rooms', ['host_email', 'status'])

    op.create_table(
        'bookings',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('room_id', sa.String(36), nullable=False),
        sa.Column('room_title', sa.String(200), nullable=True),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('host_email', sa.String(255), nullable=False),
        sa.Column('host_name', sa.String(100), nullable=True),
        sa.Column('guest_email', sa.String(255), nullable=False),
        sa.Column('guest_name', sa.String(100), nullable=True),
        sa.Column('guest_image', sa.String(500), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_reference', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_bookings_room_id', 'bookings', ['room_id'])
    op.create_index('ix_bookings_host_email', 'bookings', ['host_email'])
    op.create_index('ix_bookings_guest_email', 'bookings', ['guest_email'])
    op.create_index('ix_booking_payment_reference', 'bookings', ['payment_reference'])


def downgrade() -> None:
    op.drop_table('bookings')
    op.drop_table('rooms')
    op.drop_table('users')
