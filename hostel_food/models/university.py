"""University (tenant) ORM models."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_food.core.config import settings
from hostel_food.db.base import Base


class University(Base):
    """Tenant owning menus, students, orders and the ordering time config."""

    __tablename__ = "universities"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str | None] = mapped_column(String(10), nullable=True, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default=lambda: settings.default_timezone)
    order_cutoff_time: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        default=lambda: settings.default_order_cutoff_time,
    )
    max_advance_days: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=lambda: settings.default_max_advance_days,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    students: Mapped[list["User"]] = relationship(back_populates="university")
    manager_assignments: Mapped[list["UniversityManager"]] = relationship(back_populates="university")
    menus: Mapped[list["Menu"]] = relationship(back_populates="university")
    orders: Mapped[list["Order"]] = relationship(back_populates="university")


class UniversityManager(Base):
    """Assignment of a manager account to a university."""

    __tablename__ = "university_managers"
    __table_args__ = (
        UniqueConstraint("university_id", "manager_id", name="uq_university_manager"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    university_id: Mapped[int] = mapped_column(ForeignKey("universities.id"), nullable=False, index=True)
    manager_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    university: Mapped[University] = relationship(back_populates="manager_assignments")
    manager: Mapped["User"] = relationship(back_populates="manager_assignments")
