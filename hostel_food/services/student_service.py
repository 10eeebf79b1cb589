"""Student approval workflow used by university managers."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostel_food.models import User, UserRole, UserStatus
from hostel_food.services.audit_service import log_action

STUDENT_ACTIONS: dict[str, tuple[str, str]] = {
    "approve": (UserStatus.APPROVED.value, "approved"),
    "reject": (UserStatus.REJECTED.value, "rejected"),
    "suspend": (UserStatus.SUSPENDED.value, "suspended"),
    "reactivate": (UserStatus.APPROVED.value, "reactivated"),
}


class StudentNotFoundError(Exception):
    pass


class InvalidStudentActionError(Exception):
    pass


def list_students(db: Session, university_ids: list[int], status: str = UserStatus.PENDING.value) -> list[User]:
    if not university_ids:
        return []
    return list(
        db.scalars(
            select(User)
            .where(
                User.role == UserRole.STUDENT.value,
                User.status == status,
                User.university_id.in_(university_ids),
            )
            .order_by(User.created_at.desc(), User.id.desc())
        )
    )


def get_student(db: Session, student_id: int) -> User:
    student = db.get(User, student_id)
    if student is None or student.role != UserRole.STUDENT.value:
        raise StudentNotFoundError("Student not found")
    return student


def apply_student_action(db: Session, *, manager: User, student: User, action: str) -> str:
    """Move the student to the status the action implies and return the past-tense verb."""
    if action not in STUDENT_ACTIONS:
        raise InvalidStudentActionError("Invalid action")
    new_status, verb = STUDENT_ACTIONS[action]

    before = {"status": student.status}
    student.status = new_status
    log_action(
        db,
        actor=manager,
        action_type=f"student_{action}",
        entity_type="user",
        entity_id=student.id,
        before_snapshot=before,
        after_snapshot={"status": new_status},
    )
    db.commit()
    db.refresh(student)
    return verb
