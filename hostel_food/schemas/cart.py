"""Cart and checkout schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from hostel_food.services.scheduling import DATE_KEY_PATTERN


class _ScheduledDatePayload(BaseModel):
    scheduled_for_date: str

    @field_validator("scheduled_for_date")
    @classmethod
    def check_date_key(cls, value: str) -> str:
        if not DATE_KEY_PATTERN.match(value):
            raise ValueError("scheduled_for_date must be YYYY-MM-DD")
        return value


class CartAdd(_ScheduledDatePayload):
    menu_item_id: int
    variant_id: int
    quantity: int = Field(default=1, ge=1, le=50)


class CartUpdate(_ScheduledDatePayload):
    menu_item_id: int
    variant_id: int
    quantity: int = Field(ge=0, le=50)


class CheckoutRequest(_ScheduledDatePayload):
    pass


class CartItemResponse(BaseModel):
    id: int
    menu_item_id: int
    menu_item_name: str
    variant_id: int
    variant_name: str
    price: Decimal
    quantity: int
    scheduled_for_date: date


class CartResponse(BaseModel):
    items: list[CartItemResponse]


class CartDeleteResponse(BaseModel):
    deleted: bool = True


def serialize_cart_item(line) -> CartItemResponse:
    return CartItemResponse(
        id=line.id,
        menu_item_id=line.menu_item_id,
        menu_item_name=line.menu_item.name,
        variant_id=line.variant_id,
        variant_name=line.variant.name,
        price=line.variant.price,
        quantity=line.quantity,
        scheduled_for_date=line.scheduled_for_date,
    )
