"""Manager student-approval schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class StudentResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    status: str
    university_id: int | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StudentAction(BaseModel):
    student_id: int
    action: Literal["approve", "reject", "suspend", "reactivate"]


class StudentActionResponse(BaseModel):
    message: str
    student: StudentResponse
