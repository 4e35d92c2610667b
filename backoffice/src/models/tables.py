"""
Relational table definitions for the back-office entities.

Uses SQLAlchemy 2.0 declarative syntax. The metadata is the single source
of truth for the storage schema: the PostgreSQL store renders its DDL from
it and the in-memory store reads the unique constraints from it.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all table models."""
    pass


# ============================================================================
# Marketing hierarchy
# ============================================================================


class MarketingAreaTable(Base):
    """Top-level marketing grouping."""
    __tablename__ = "marketing_areas"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    code: Mapped[Optional[str]] = mapped_column(String(50), unique=True, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class MarketingSubAreaTable(Base):
    """Sub-area belonging to exactly one area."""
    __tablename__ = "marketing_sub_areas"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    code: Mapped[Optional[str]] = mapped_column(String(50), unique=True, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    area_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("marketing_areas.id", ondelete="CASCADE"),
        nullable=False
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_marketing_sub_areas_area_id", "area_id"),
    )


class MarketingBranchTable(Base):
    """Branch belonging to an area and optionally a sub-area."""
    __tablename__ = "marketing_branches"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    code: Mapped[Optional[str]] = mapped_column(String(50), unique=True, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    area_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("marketing_areas.id", ondelete="CASCADE"),
        nullable=False
    )
    sub_area_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("marketing_sub_areas.id", ondelete="CASCADE"),
        nullable=True
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_marketing_branches_area_id", "area_id"),
        Index("idx_marketing_branches_sub_area_id", "sub_area_id"),
    )


class MarketingUserProfileTable(Base):
    """Marketing-specific profile of a user (one per user)."""
    __tablename__ = "marketing_user_profiles"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, unique=True, nullable=False)
    department_manager: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    manager_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    user_signature: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class WeeklyScheduleTable(Base):
    """Weekly marketing schedule of a user."""
    __tablename__ = "weekly_schedules"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    branch_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("marketing_branches.id", ondelete="SET NULL"),
        nullable=True
    )
    created_by: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "year", "month", "week_number",
            name="uq_weekly_schedules_user_period"
        ),
    )


# ============================================================================
# Call service
# ============================================================================


class CallStatusTable(Base):
    """Configurable call outcome status."""
    __tablename__ = "call_statuses"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    created_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


metadata = Base.metadata
