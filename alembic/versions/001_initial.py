"""Booking slots and reservations

Revision ID: 001
Revises: 
Create Date: 2025-05-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Admin overrides, one row per session
    op.create_table(
        'booking_slots',
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('capacity_social', sa.Integer(), nullable=False, server_default='12'),
        sa.Column('is_blocked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('date', 'start_time'),
    )

    # Reservations
    op.create_table(
        'booking_reservations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('booking_type', sa.String(20), nullable=False),
        sa.Column('guests', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(30)),
        sa.Column('notes', sa.Text()),
        sa.Column('status', sa.String(20), nullable=False, server_default='confirmed'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint('guests > 0', name='ck_booking_reservations_guests_positive'),
        sa.CheckConstraint("booking_type IN ('social', 'private')", name='ck_booking_reservations_type'),
    )

    op.create_index(
        'ix_booking_reservations_date_start',
        'booking_reservations',
        ['date', 'start_time'],
    )


def downgrade() -> None:
    op.drop_index('ix_booking_reservations_date_start', table_name='booking_reservations')
    op.drop_table('booking_reservations')
    op.drop_table('booking_slots')
