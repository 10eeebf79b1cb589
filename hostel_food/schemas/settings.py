"""University ordering-window settings schemas."""

from pydantic import BaseModel, Field, field_validator

from hostel_food.services.scheduling import CUTOFF_TIME_PATTERN, MAX_ADVANCE_DAYS, MIN_ADVANCE_DAYS, parse_cutoff_time


class TimeSettings(BaseModel):
    """Validated ordering window config of one university."""

    order_cutoff_time: str = Field(pattern=CUTOFF_TIME_PATTERN.pattern)
    max_advance_days: int = Field(ge=MIN_ADVANCE_DAYS, le=MAX_ADVANCE_DAYS)
    timezone: str = Field(min_length=1)

    @field_validator("order_cutoff_time")
    @classmethod
    def validate_cutoff_clock(cls, value: str) -> str:
        # time() rejects 24:00 and anything past 23:59
        parse_cutoff_time(value)
        return value


class StudentSettingsResponse(TimeSettings):
    university_id: int
    university_name: str
