"""University (tenant) administration and manager assignment."""

from __future__ import annotations

import logging
import re

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from hostel_food.core.security import get_password_hash
from hostel_food.models import Menu, Order, University, UniversityManager, User, UserRole, UserStatus
from hostel_food.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)

UNIVERSITY_CODE_PATTERN = re.compile(r"^[A-Z0-9]{2,10}$")


class UniversityValidationError(Exception):
    """Raised for invalid university or manager payloads (HTTP 400)."""


class UniversityConflictError(Exception):
    """Raised when a name, code or email is already taken (HTTP 409)."""


class UniversityInUseError(Exception):
    """Raised when deleting a university that still has attached records."""

    def __init__(self, counts: dict[str, int]) -> None:
        self.counts = counts
        super().__init__(
            "Cannot delete university with associated students, managers, menus, or orders. Deactivate it instead."
        )


def list_active_universities(db: Session) -> list[University]:
    return list(db.scalars(select(University).where(University.is_active.is_(True)).order_by(University.name.asc())))


def university_counts(db: Session, university_id: int) -> dict[str, int]:
    """Return how many students, managers, menus and orders reference the university."""
    return {
        "students": db.scalar(
            select(func.count(User.id)).where(User.university_id == university_id, User.role == UserRole.STUDENT.value)
        )
        or 0,
        "managers": db.scalar(
            select(func.count(UniversityManager.id)).where(UniversityManager.university_id == university_id)
        )
        or 0,
        "menus": db.scalar(select(func.count(Menu.id)).where(Menu.university_id == university_id)) or 0,
        "orders": db.scalar(select(func.count(Order.id)).where(Order.university_id == university_id)) or 0,
    }


def list_universities_with_counts(db: Session) -> list[tuple[University, dict[str, int]]]:
    universities = db.scalars(select(University).order_by(University.name.asc())).all()
    return [(university, university_counts(db, university.id)) for university in universities]


def _clean_code(code: str | None) -> str | None:
    if not code or not code.strip():
        return None
    cleaned = code.strip().upper()
    if not UNIVERSITY_CODE_PATTERN.match(cleaned):
        raise UniversityValidationError(
            "University code must be 2-10 characters, uppercase letters and numbers only"
        )
    return cleaned


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _ensure_unique(db: Session, *, name: str, code: str | None, exclude_id: int | None = None) -> None:
    conditions = [University.name == name]
    if code:
        conditions.append(University.code == code)
    query = select(University).where(or_(*conditions))
    if exclude_id is not None:
        query = query.where(University.id != exclude_id)
    existing: University | None = db.scalar(query.limit(1))
    if existing is None:
        return
    prefix = "University" if exclude_id is None else "Another university"
    if existing.name == name:
        raise UniversityConflictError(f"{prefix} with this name already exists")
    raise UniversityConflictError(f"{prefix} with this code already exists")


def create_university(
    db: Session,
    *,
    name: str,
    code: str | None = None,
    location: str | None = None,
    description: str | None = None,
) -> University:
    clean_name = (name or "").strip()
    if not clean_name:
        raise UniversityValidationError("University name is required")
    clean_code = _clean_code(code)
    _ensure_unique(db, name=clean_name, code=clean_code)

    university = University(
        name=clean_name,
        code=clean_code,
        location=_clean_optional(location),
        description=_clean_optional(description),
    )
    db.add(university)
    db.commit()
    db.refresh(university)
    logger.info("[ADMIN] University created id=%s name=%s", university.id, university.name)
    return university


def update_university(
    db: Session,
    university: University,
    *,
    name: str,
    code: str | None = None,
    location: str | None = None,
    description: str | None = None,
    is_active: bool | None = None,
) -> University:
    clean_name = (name or "").strip()
    if not clean_name:
        raise UniversityValidationError("University name is required")
    clean_code = _clean_code(code)
    _ensure_unique(db, name=clean_name, code=clean_code, exclude_id=university.id)

    university.name = clean_name
    university.code = clean_code
    university.location = _clean_optional(location)
    university.description = _clean_optional(description)
    if is_active is not None:
        university.is_active = is_active
    db.commit()
    db.refresh(university)
    return university


def delete_university(db: Session, university: University) -> None:
    counts = university_counts(db, university.id)
    if any(counts.values()):
        raise UniversityInUseError(counts)
    db.delete(university)
    db.commit()
    logger.info("[ADMIN] University deleted id=%s", university.id)


def create_manager(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    university_id: int,
    phone: str | None = None,
) -> tuple[User, University]:
    """Create an approved manager account assigned to an active university."""
    if get_user_by_email(db, email) is not None:
        raise UniversityConflictError("A user with this email already exists")

    university: University | None = db.scalar(
        select(University).where(University.id == university_id, University.is_active.is_(True)).limit(1)
    )
    if university is None:
        raise UniversityValidationError("Invalid or inactive university")

    manager = create_user(
        db,
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        role=UserRole.MANAGER.value,
        status=UserStatus.APPROVED.value,
        phone=_clean_optional(phone),
        commit=False,
    )
    db.add(UniversityManager(university_id=university.id, manager_id=manager.id))
    db.commit()
    db.refresh(manager)
    logger.info("[ADMIN] Manager id=%s assigned to university id=%s", manager.id, university.id)
    return manager, university


def manager_university_ids(db: Session, manager: User) -> list[int]:
    """Return the universities a manager may act on, primary first."""
    assigned = list(
        db.scalars(
            select(UniversityManager.university_id)
            .where(UniversityManager.manager_id == manager.id)
            .order_by(UniversityManager.id.asc())
        )
    )
    if manager.university_id is not None:
        return [manager.university_id] + [uid for uid in assigned if uid != manager.university_id]
    return assigned
