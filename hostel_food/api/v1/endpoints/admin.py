"""Admin endpoints: universities and manager accounts."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hostel_food.auth import require_admin
from hostel_food.db.session import get_db
from hostel_food.models import University, User
from hostel_food.schemas.auth import MessageResponse
from hostel_food.schemas.university import (
    ManagerCreate,
    ManagerResponse,
    UniversityCounts,
    UniversityCreate,
    UniversityResponse,
    UniversityUpdate,
)
from hostel_food.services.university_service import (
    UniversityConflictError,
    UniversityInUseError,
    UniversityValidationError,
    create_manager,
    create_university,
    delete_university,
    list_universities_with_counts,
    university_counts,
    update_university,
)

router: APIRouter = APIRouter()


def _serialize(university: University, counts: dict[str, int] | None = None) -> UniversityResponse:
    response = UniversityResponse.model_validate(university)
    if counts is not None:
        response.counts = UniversityCounts(**counts)
    return response


def _get_university_or_404(db: Session, university_id: int) -> University:
    university: University | None = db.get(University, university_id)
    if university is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="University not found")
    return university


@router.get("/universities", response_model=list[UniversityResponse])
def list_universities(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[UniversityResponse]:
    return [_serialize(university, counts) for university, counts in list_universities_with_counts(db)]


@router.post("/universities", response_model=UniversityResponse, status_code=status.HTTP_201_CREATED)
def create_university_endpoint(
    payload: UniversityCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> UniversityResponse:
    try:
        university = create_university(
            db,
            name=payload.name,
            code=payload.code,
            location=payload.location,
            description=payload.description,
        )
    except UniversityValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except UniversityConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _serialize(university)


@router.put("/universities/{university_id}", response_model=UniversityResponse)
def update_university_endpoint(
    university_id: int,
    payload: UniversityUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> UniversityResponse:
    university = _get_university_or_404(db, university_id)
    try:
        university = update_university(
            db,
            university,
            name=payload.name,
            code=payload.code,
            location=payload.location,
            description=payload.description,
            is_active=payload.is_active,
        )
    except UniversityValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except UniversityConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _serialize(university, university_counts(db, university.id))


@router.delete("/universities/{university_id}", response_model=MessageResponse)
def delete_university_endpoint(
    university_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> MessageResponse:
    university = _get_university_or_404(db, university_id)
    try:
        delete_university(db, university)
    except UniversityInUseError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": str(exc), "details": exc.counts},
        ) from exc
    return MessageResponse(message="University deleted successfully")


@router.post("/managers", response_model=ManagerResponse, status_code=status.HTTP_201_CREATED)
def create_manager_endpoint(
    payload: ManagerCreate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> ManagerResponse:
    try:
        manager, university = create_manager(
            db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            university_id=payload.university_id,
            phone=payload.phone,
        )
    except UniversityConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except UniversityValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ManagerResponse(
        id=manager.id,
        name=manager.name,
        email=manager.email,
        phone=manager.phone,
        university=university.name,
        message=f"Manager {manager.name} created successfully and assigned to {university.name}",
    )
