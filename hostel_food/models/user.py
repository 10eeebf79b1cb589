"""User ORM model and account enums."""

import enum
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_food.db.base import Base


class UserRole(str, enum.Enum):
    """Closed set of role scopes."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    STUDENT = "STUDENT"


class UserStatus(str, enum.Enum):
    """Approval lifecycle of an account."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SUSPENDED = "SUSPENDED"


USER_ROLES = tuple(role.value for role in UserRole)
USER_STATUSES = tuple(status.value for status in UserStatus)


def normalize_user_role(value: str) -> str:
    """Return canonical uppercase role or raise ValueError."""
    normalized = str(value or "").strip().upper()
    if normalized not in USER_ROLES:
        raise ValueError(f"Invalid role: {value}")
    return normalized


class User(Base):
    """Account for admins, university managers and students."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(Enum(*USER_ROLES, name="user_role"), nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(*USER_STATUSES, name="user_status"),
        nullable=False,
        default=UserStatus.PENDING.value,
    )
    university_id: Mapped[int | None] = mapped_column(ForeignKey("universities.id"), nullable=True, index=True)
    reset_token_hash: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    reset_token_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
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

    university: Mapped["University | None"] = relationship(back_populates="students")
    manager_assignments: Mapped[list["UniversityManager"]] = relationship(
        back_populates="manager",
        cascade="all, delete-orphan",
    )
