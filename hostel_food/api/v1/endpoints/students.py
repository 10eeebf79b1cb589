"""Manager student approval endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from hostel_food.auth import require_manager
from hostel_food.db.session import get_db
from hostel_food.models import User
from hostel_food.models.user import USER_STATUSES, UserStatus
from hostel_food.schemas.student import StudentAction, StudentActionResponse, StudentResponse
from hostel_food.services.security_guards import ensure_manager_access
from hostel_food.services.student_service import StudentNotFoundError, apply_student_action, get_student, list_students
from hostel_food.services.university_service import manager_university_ids

router: APIRouter = APIRouter()


@router.get("", response_model=list[StudentResponse])
def list_students_endpoint(
    status_filter: str = Query(default=UserStatus.PENDING.value, alias="status"),
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> list[StudentResponse]:
    status_value = status_filter.strip().upper()
    if status_value not in USER_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")
    students = list_students(db, manager_university_ids(db, manager), status_value)
    return [StudentResponse.model_validate(student) for student in students]


@router.patch("", response_model=StudentActionResponse)
def update_student(
    payload: StudentAction,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> StudentActionResponse:
    try:
        student = get_student(db, payload.student_id)
    except StudentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if student.university_id is None:
        raise HTTPException(status_code=403, detail="No access to this student")
    ensure_manager_access(db, manager, student.university_id)

    verb = apply_student_action(db, manager=manager, student=student, action=payload.action)
    return StudentActionResponse(
        message=f"Student {verb} successfully",
        student=StudentResponse.model_validate(student),
    )
