"""clinic schema and saved reports

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text()),
        sa.Column("phone", sa.String(20)),
        *_timestamps(),
    )
    op.create_table(
        "facilities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("organization_id", sa.Integer(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text()),
        sa.Column("phone", sa.String(20)),
        *_timestamps(),
    )
    op.create_index("ix_facilities_organization_id", "facilities", ["organization_id"])

    op.create_table(
        "doctors",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("facility_id", sa.Integer(), sa.ForeignKey("facilities.id"), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(20)),
        sa.Column("specialty", sa.String(100)),
        *_timestamps(),
    )
    op.create_index("ix_doctors_facility_id", "doctors", ["facility_id"])

    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("facility_id", sa.Integer(), sa.ForeignKey("facilities.id"), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), unique=True),
        sa.Column("phone", sa.String(20)),
        sa.Column("date_of_birth", sa.Date()),
        sa.Column("address", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_patients_facility_id", "patients", ["facility_id"])

    op.create_table(
        "insurances",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("provider_name", sa.String(255), nullable=False),
        sa.Column("policy_number", sa.String(100), nullable=False),
        sa.Column("group_number", sa.String(100)),
        sa.Column("effective_date", sa.Date()),
        sa.Column("expiration_date", sa.Date()),
        *_timestamps(),
    )
    op.create_index("ix_insurances_patient_id", "insurances", ["patient_id"])

    op.create_table(
        "visits",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("doctor_id", sa.Integer(), sa.ForeignKey("doctors.id"), nullable=False),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("visit_date", sa.TIMESTAMP(), nullable=False),
        sa.Column("reason", sa.Text()),
        sa.Column("diagnosis", sa.Text()),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_visits_doctor_id", "visits", ["doctor_id"])
    op.create_index("ix_visits_patient_id", "visits", ["patient_id"])

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("chart_type", sa.String(50)),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("reports")
    op.drop_index("ix_visits_patient_id", table_name="visits")
    op.drop_index("ix_visits_doctor_id", table_name="visits")
    op.drop_table("visits")
    op.drop_index("ix_insurances_patient_id", table_name="insurances")
    op.drop_table("insurances")
    op.drop_index("ix_patients_facility_id", table_name="patients")
    op.drop_table("patients")
    op.drop_index("ix_doctors_facility_id", table_name="doctors")
    op.drop_table("doctors")
    op.drop_index("ix_facilities_organization_id", table_name="facilities")
    op.drop_table("facilities")
    op.drop_table("organizations")
