"""Public university listing for the registration form."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hostel_food.db.session import get_db
from hostel_food.schemas.university import UniversityOption
from hostel_food.services.university_service import list_active_universities

router: APIRouter = APIRouter()


@router.get("", response_model=list[UniversityOption])
def list_universities(db: Session = Depends(get_db)) -> list[UniversityOption]:
    return [UniversityOption.model_validate(university) for university in list_active_universities(db)]
