"""Initial ward dashboard schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'patients',
        sa.Column('patient_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('medical_record_number', sa.String(length=50), nullable=True),
        sa.Column('admission_status', sa.String(length=50), nullable=True),
        sa.Column('priority_level', sa.Integer(), nullable=True),
        sa.Column('admit_reason', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('patient_id'),
    )
    op.create_index('ix_patients_medical_record_number', 'patients', ['medical_record_number'])

    op.create_table(
        'wards',
        sa.Column('ward_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=True),
        sa.Column('num_of_total_beds', sa.Integer(), nullable=True),
        sa.Column('building', sa.String(length=100), nullable=True),
        sa.Column('floor_number', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('ward_id'),
    )

    op.create_table(
        'beds',
        sa.Column('bed_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('ward_id', sa.Integer(), nullable=True),
        sa.Column('bed_number', sa.String(length=50), nullable=True),
        sa.Column('bed_status', sa.String(length=50), nullable=True),
        sa.Column('bed_type', sa.String(length=50), nullable=True),
        sa.Column('patient_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['ward_id'], ['wards.ward_id']),
        sa.ForeignKeyConstraint(['patient_id'], ['patients.patient_id']),
        sa.PrimaryKeyConstraint('bed_id'),
        sa.UniqueConstraint('bed_number'),
    )
    op.create_index('ix_beds_ward_id', 'beds', ['ward_id'])
    op.create_index('ix_beds_patient_id', 'beds', ['patient_id'])

    op.create_table(
        'admissions',
        sa.Column('admission_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=True),
        sa.Column('ward_id', sa.Integer(), nullable=True),
        sa.Column('bed_id', sa.Integer(), nullable=True),
        sa.Column('admission_date', sa.Date(), nullable=True),
        sa.Column('admission_time', sa.Time(), nullable=True),
        sa.Column('discharge_date', sa.Date(), nullable=True),
        sa.Column('discharge_time', sa.Time(), nullable=True),
        sa.Column('admission_reason', sa.Text(), nullable=True),
        sa.Column('disposition', sa.String(length=50), nullable=True),
        sa.Column('transfer_from', sa.Integer(), nullable=True),
        sa.Column('transfer_to', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('admission_id'),
    )
    op.create_index('ix_admissions_patient_id', 'admissions', ['patient_id'])
    op.create_index('ix_admissions_bed_id', 'admissions', ['bed_id'])

    op.create_table(
        'forecasts',
        sa.Column('forecast_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('ward_id', sa.Integer(), nullable=True),
        sa.Column('forecast_date', sa.Date(), nullable=True),
        sa.Column('predicted_admissions', sa.Integer(), nullable=True),
        sa.Column('predicted_discharges', sa.Integer(), nullable=True),
        sa.Column('predicted_occupancy', sa.Integer(), nullable=True),
        sa.Column('model_version', sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint('forecast_id'),
    )
    op.create_index('ix_forecasts_ward_id', 'forecasts', ['ward_id'])

    op.create_table(
        'roles',
        sa.Column('role_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('role_name', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('role_id'),
    )

    op.create_table(
        'users',
        sa.Column('user_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('username', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('display_name', sa.String(length=200), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=True),
        sa.Column('ward_id', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('user_id'),
    )
    op.create_index('ix_users_username', 'users', ['username'])


def downgrade() -> None:
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
    op.drop_table('roles')
    op.drop_index('ix_forecasts_ward_id', table_name='forecasts')
    op.drop_table('forecasts')
    op.drop_index('ix_admissions_bed_id', table_name='admissions')
    op.drop_index('ix_admissions_patient_id', table_name='admissions')
    op.drop_table('admissions')
    op.drop_index('ix_beds_patient_id', table_name='beds')
    op.drop_index('ix_beds_ward_id', table_name='beds')
    op.drop_table('beds')
    op.drop_table('wards')
    op.drop_index('ix_patients_medical_record_number', table_name='patients')
    op.drop_table('patients')
