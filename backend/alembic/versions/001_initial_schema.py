"""Initial database schema

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
    # === STAFF TABLE ===
    op.create_table(
        'staff',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('role', sa.String(100), nullable=True),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_staff_id', 'staff', ['id'])
    op.create_index('ix_staff_department', 'staff', ['department'])

    # === PROJECTS TABLE ===
    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('estimated_hours', sa.Float(), nullable=True),
        sa.Column('estimated_shoot_hours', sa.Float(), nullable=True),
        sa.Column('estimated_edit_hours', sa.Float(), nullable=True),
        sa.Column('assigned_staff_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['assigned_staff_id'], ['staff.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_projects_id', 'projects', ['id'])

    # === STAFF AVAILABILITY TABLE ===
    op.create_table(
        'staff_availability',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('staff_id', 'day_of_week', name='uq_staff_availability_staff_day'),
        sa.CheckConstraint('day_of_week BETWEEN 1 AND 7', name='ck_staff_availability_day'),
        sa.CheckConstraint('end_time > start_time', name='ck_staff_availability_window')
    )
    op.create_index('ix_staff_availability_id', 'staff_availability', ['id'])
    op.create_index('ix_staff_availability_staff_id', 'staff_availability', ['staff_id'])

    # === STAFF TIME OFF TABLE ===
    op.create_table(
        'staff_time_off',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_full_day', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('type', sa.String(50), nullable=True),
        sa.Column('reason', sa.String(500), nullable=True),
        sa.Column('status', sa.Enum('pending', 'approved', 'denied', 'cancelled', name='timeoffstatus'), nullable=False),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('end_date >= start_date', name='ck_staff_time_off_range')
    )
    op.create_index('ix_staff_time_off_id', 'staff_time_off', ['id'])
    op.create_index('ix_staff_time_off_staff_id', 'staff_time_off', ['staff_id'])

    # === PROJECT BOOKINGS TABLE ===
    op.create_table(
        'project_bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.Integer(), nullable=False),
        sa.Column('booking_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('hours_booked', sa.Float(), nullable=False),
        sa.Column('status', sa.Enum('scheduled', 'in_progress', 'completed', 'cancelled', name='bookingstatus'), nullable=False),
        sa.Column('type', sa.Enum('shoot', 'edit', name='bookingtype'), nullable=True),
        sa.Column('notes', sa.String(500), nullable=True),
        sa.Column('sequence_index', sa.Integer(), nullable=True),
        sa.Column('sequence_total', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('end_time > start_time', name='ck_project_bookings_time')
    )
    op.create_index('ix_project_bookings_id', 'project_bookings', ['id'])
    op.create_index('ix_project_bookings_staff_date', 'project_bookings', ['staff_id', 'booking_date'])
    op.create_index('ix_project_bookings_project_id', 'project_bookings', ['project_id'])

    # No two active bookings for one staff member may overlap
    if op.get_bind().dialect.name == 'postgresql':
        op.execute('CREATE EXTENSION IF NOT EXISTS btree_gist')
        op.execute(
            """
            ALTER TABLE project_bookings
            ADD CONSTRAINT ex_project_bookings_no_overlap
            EXCLUDE USING gist (
                staff_id WITH =,
                tsrange(booking_date + start_time, booking_date + end_time, '[)') WITH &&
            ) WHERE (status <> 'cancelled')
            """
        )


def downgrade() -> None:
    # Drop tables in reverse order of creation (respecting foreign keys)
    if op.get_bind().dialect.name == 'postgresql':
        op.execute('ALTER TABLE project_bookings DROP CONSTRAINT IF EXISTS ex_project_bookings_no_overlap')

    op.drop_index('ix_project_bookings_project_id', 'project_bookings')
    op.drop_index('ix_project_bookings_staff_date', 'project_bookings')
    op.drop_index('ix_project_bookings_id', 'project_bookings')
    op.drop_table('project_bookings')

    op.drop_index('ix_staff_time_off_staff_id', 'staff_time_off')
    op.drop_index('ix_staff_time_off_id', 'staff_time_off')
    op.drop_table('staff_time_off')

    op.drop_index('ix_staff_availability_staff_id', 'staff_availability')
    op.drop_index('ix_staff_availability_id', 'staff_availability')
    op.drop_table('staff_availability')

    op.drop_index('ix_projects_id', 'projects')
    op.drop_table('projects')

    op.drop_index('ix_staff_department', 'staff')
    op.drop_index('ix_staff_id', 'staff')
    op.drop_table('staff')

    # Drop enums
    op.execute('DROP TYPE IF EXISTS bookingtype')
    op.execute('DROP TYPE IF EXISTS bookingstatus')
    op.execute('DROP TYPE IF EXISTS timeoffstatus')
