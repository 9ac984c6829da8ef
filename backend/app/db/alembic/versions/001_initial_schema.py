"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-09-28

Creates:
- users
- trips, expenses
- emission_factors (partial unique index on active rows)
- admin_audit_log
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JSON_DOCUMENT = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""
    # users table
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.String(20), server_default="user", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # trips table
    op.create_table(
        "trips",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("destination", sa.String(200), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("budget", sa.Numeric(10, 2), nullable=False),
        sa.Column("interests", JSON_DOCUMENT, nullable=False),
        sa.Column("travel_style", sa.String(50), nullable=True),
        sa.Column("accommodation_preference", sa.String(50), nullable=True),
        sa.Column("transport_preference", sa.String(50), nullable=True),
        sa.Column("itinerary", JSON_DOCUMENT, nullable=True),
        sa.Column("location", JSON_DOCUMENT, nullable=True),
        sa.Column("total_carbon_kg", sa.Numeric(10, 2), server_default="0", nullable=False),
        sa.Column("transport_carbon_kg", sa.Numeric(10, 2), server_default="0", nullable=False),
        sa.Column("accommodation_carbon_kg", sa.Numeric(10, 2), server_default="0", nullable=False),
        sa.Column("activities_carbon_kg", sa.Numeric(10, 2), server_default="0", nullable=False),
        sa.Column("total_cost", sa.Numeric(10, 2), server_default="0", nullable=False),
        sa.Column("green_score", sa.Integer(), server_default="0", nullable=False),
        sa.Column("destination_distance_km", sa.Numeric(10, 2), server_default="0", nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("green_score >= 0 AND green_score <= 100", name="ck_trips_green_score"),
        sa.CheckConstraint("end_date >= start_date", name="ck_trips_date_range"),
    )
    op.create_index("idx_trips_user_created", "trips", ["user_id", "created_at"])
    op.create_index("idx_trips_start_date", "trips", ["start_date"])

    # expenses table
    op.create_table(
        "expenses",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("trip_id", sa.Uuid(), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("expense_date", sa.Date(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["trip_id"], ["trips.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "category IN ('transport', 'accommodation', 'food', 'activities', 'shopping', 'other')",
            name="ck_expenses_category",
        ),
    )
    op.create_index("idx_expenses_trip_id", "expenses", ["trip_id"])
    op.create_index("idx_expenses_date", "expenses", ["expense_date"])

    # emission_factors table
    op.create_table(
        "emission_factors",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("sub_category", sa.String(100), nullable=False),
        sa.Column("factor_kg_per_unit", sa.Numeric(10, 6), nullable=False),
        sa.Column("unit", sa.String(50), nullable=False),
        sa.Column("source", sa.String(255), server_default="DEFRA 2023", nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "category IN ('transport', 'accommodation', 'activity')",
            name="ck_emission_factors_category",
        ),
    )
    op.create_index(
        "uq_emission_factors_active",
        "emission_factors",
        ["category", "sub_category"],
        unique=True,
        postgresql_where=sa.text("is_active"),
        sqlite_where=sa.text("is_active = 1"),
    )
    op.create_index("idx_emission_factors_category", "emission_factors", ["category"])

    # admin_audit_log table
    op.create_table(
        "admin_audit_log",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("admin_user_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("target_resource", sa.String(100), nullable=False),
        sa.Column("target_id", sa.String(64), nullable=True),
        sa.Column("details", JSON_DOCUMENT, nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_audit_admin_created", "admin_audit_log", ["admin_user_id", "created_at"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("admin_audit_log")
    op.drop_table("emission_factors")
    op.drop_table("expenses")
    op.drop_table("trips")
    op.drop_table("users")
