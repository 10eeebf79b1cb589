"""Centralized tenant and ownership guards for manager and student routes."""

from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy.orm import Session

from hostel_food.models import Order, University, User, UserRole
from hostel_food.services.university_service import manager_university_ids


def resolve_manager_university(db: Session, manager: User) -> University:
    """Return the university the manager currently acts on."""
    university_ids = manager_university_ids(db, manager)
    if not university_ids:
        raise HTTPException(status_code=403, detail="No university assigned")
    university: University | None = db.get(University, university_ids[0])
    if university is None:
        raise HTTPException(status_code=404, detail="University not found")
    return university


def ensure_manager_access(db: Session, manager: User, university_id: int) -> None:
    """Forbid managers from touching another tenant's records."""
    if university_id not in manager_university_ids(db, manager):
        raise HTTPException(status_code=403, detail="No access to this university")


def resolve_student_university(db: Session, student: User) -> University:
    if student.university_id is None:
        raise HTTPException(status_code=400, detail="No university assigned")
    university: University | None = db.get(University, student.university_id)
    if university is None:
        raise HTTPException(status_code=400, detail="No university assigned")
    return university


def ensure_can_access_order(user: User, order: Order, db: Session) -> None:
    """Apply ownership checks; return 404 to avoid leaking other students' orders."""
    if user.role == UserRole.ADMIN.value:
        return
    if user.role == UserRole.MANAGER.value:
        ensure_manager_access(db, user, order.university_id)
        return
    if order.user_id != user.id:
        raise HTTPException(status_code=404, detail="Order not found")
