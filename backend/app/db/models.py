"""SQLAlchemy ORM models."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class User(Base):
    """User table - accounts are managed by the auth collaborator."""

    __tablename__ = "users"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    trips: Mapped[list["Trip"]] = relationship(
        "Trip", back_populates="user", cascade="all, delete-orphan"
    )


class Trip(Base):
    """Trip table - one generated itinerary with its derived carbon and cost."""

    __tablename__ = "trips"
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (
        CheckConstraint("green_score >= 0 AND green_score <= 100", name="ck_trips_green_score"),
        CheckConstraint("end_date >= start_date", name="ck_trips_date_range"),
        Index("idx_trips_user_created", "user_id", "created_at"),
        Index("idx_trips_start_date", "start_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    destination: Mapped[str] = mapped_column(String(200), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    budget: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    interests: Mapped[list[str]] = mapped_column(JSONDocument, nullable=False, default=list)
    travel_style: Mapped[str | None] = mapped_column(String(50), nullable=True)
    accommodation_preference: Mapped[str | None] = mapped_column(String(50), nullable=True)
    transport_preference: Mapped[str | None] = mapped_column(String(50), nullable=True)
    itinerary: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    location: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    total_carbon_kg: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    transport_carbon_kg: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    accommodation_carbon_kg: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=0
    )
    activities_carbon_kg: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=0
    )
    total_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    green_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    destination_distance_km: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=0
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="trips")
    expenses: Mapped[list["Expense"]] = relationship(
        "Expense", back_populates="trip", cascade="all, delete-orphan", passive_deletes=True
    )


class Expense(Base):
    """Expense table - actual spend recorded against a trip."""

    __tablename__ = "expenses"
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (
        CheckConstraint(
            "category IN ('transport', 'accommodation', 'food', 'activities', 'shopping', 'other')",
            name="ck_expenses_category",
        ),
        Index("idx_expenses_trip_id", "trip_id"),
        Index("idx_expenses_date", "expense_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False
    )
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    trip: Mapped["Trip"] = relationship("Trip", back_populates="expenses")


class EmissionFactor(Base):
    """Emission factor table - kg CO2 per unit by category/sub-category."""

    __tablename__ = "emission_factors"
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (
        CheckConstraint(
            "category IN ('transport', 'accommodation', 'activity')",
            name="ck_emission_factors_category",
        ),
        # At most one active factor per (category, sub_category)
        Index(
            "uq_emission_factors_active",
            "category",
            "sub_category",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
        Index("idx_emission_factors_category", "category"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    sub_category: Mapped[str] = mapped_column(String(100), nullable=False)
    factor_kg_per_unit: Mapped[Decimal] = mapped_column(Numeric(10, 6), nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)
    source: Mapped[str | None] = mapped_column(String(255), nullable=True, default="DEFRA 2023")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class AdminAuditLog(Base):
    """Admin audit log table - one row per administrative mutation."""

    __tablename__ = "admin_audit_log"
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (Index("idx_audit_admin_created", "admin_user_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    admin_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    target_resource: Mapped[str] = mapped_column(String(100), nullable=False)
    target_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
