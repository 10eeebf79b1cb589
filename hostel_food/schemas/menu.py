"""Menu, menu item and availability schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hostel_food.services.scheduling import DATE_KEY_PATTERN

FoodType = Literal["VEG", "NON_VEG", "HALAL"]


class VariantPayload(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    is_default: bool = False


class VariantResponse(BaseModel):
    id: int
    name: str
    price: Decimal
    is_default: bool

    model_config = ConfigDict(from_attributes=True)


class MenuItemCreate(BaseModel):
    """Payload for creating a menu item with its variants."""

    menu_id: int
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=64)
    food_type: FoodType = "VEG"
    image: str | None = Field(default=None, max_length=500)
    variants: list[VariantPayload] = Field(min_length=1)

    @field_validator("variants")
    @classmethod
    def require_default_variant(cls, value: list[VariantPayload]) -> list[VariantPayload]:
        if not any(variant.is_default for variant in value):
            raise ValueError("At least one variant must be default")
        return value


class MenuItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=64)
    food_type: FoodType | None = None
    image: str | None = Field(default=None, max_length=500)
    is_available: bool | None = None


class MenuItemResponse(BaseModel):
    """Serialized menu item."""

    id: int
    menu_id: int
    name: str
    slug: str
    description: str | None = None
    category: str | None = None
    food_type: str
    image: str | None = None
    is_available: bool
    created_at: datetime
    variants: list[VariantResponse] = []

    model_config = ConfigDict(from_attributes=True)


class MenuCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    university_id: int | None = None


class MenuResponse(BaseModel):
    id: int
    university_id: int
    name: str
    description: str | None = None
    is_active: bool
    items: list[MenuItemResponse] = []

    model_config = ConfigDict(from_attributes=True)


class AvailabilityItem(BaseModel):
    id: int
    menu_id: int
    name: str
    category: str | None = None
    is_available: bool


class AvailabilityUpdate(BaseModel):
    menu_item_id: int
    date: str
    is_available: bool

    @field_validator("date")
    @classmethod
    def check_date_key(cls, value: str) -> str:
        if not DATE_KEY_PATTERN.match(value):
            raise ValueError("date must be YYYY-MM-DD")
        return value


class AvailabilityResponse(BaseModel):
    menu_item_id: int
    date: str
    is_available: bool
