"""University and manager administration schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UniversityOption(BaseModel):
    """Entry of the public registration dropdown."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class UniversityCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    code: str | None = Field(default=None, max_length=10)
    location: str | None = None
    description: str | None = None


class UniversityUpdate(UniversityCreate):
    is_active: bool | None = None


class UniversityCounts(BaseModel):
    students: int = 0
    managers: int = 0
    menus: int = 0
    orders: int = 0


class UniversityResponse(BaseModel):
    id: int
    code: str | None = None
    name: str
    location: str | None = None
    description: str | None = None
    is_active: bool
    timezone: str
    order_cutoff_time: str
    max_advance_days: int
    created_at: datetime
    counts: UniversityCounts | None = None

    model_config = ConfigDict(from_attributes=True)


class ManagerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str | None = None
    password: str = Field(min_length=8)
    university_id: int


class ManagerResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    university: str
    message: str
