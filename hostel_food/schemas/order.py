"""Order API schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

OrderStatus = Literal["PENDING", "APPROVED", "PREPARING", "READY_TO_COLLECT", "DELIVERED", "CANCELLED"]


class OrderItemResponse(BaseModel):
    """Serialized order line with the price captured at checkout."""

    menu_item_id: int
    name: str
    variant_id: int
    variant_name: str
    quantity: int
    price: Decimal


class OrderResponse(BaseModel):
    """Serialized order."""

    id: int
    order_number: str
    status: str
    scheduled_for_date: date
    total_amount: Decimal
    university_id: int
    university_name: str
    student_name: str
    student_email: str
    notes: str | None = None
    created_at: datetime
    status_updated_at: datetime | None = None
    items: list[OrderItemResponse]


class OrderStatusUpdate(BaseModel):
    order_id: int
    status: OrderStatus


class OrderStatusByNumberUpdate(BaseModel):
    status: OrderStatus


def serialize_order(order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        order_number=order.order_number,
        status=order.status,
        scheduled_for_date=order.scheduled_for_date,
        total_amount=order.total_amount,
        university_id=order.university_id,
        university_name=order.university.name,
        student_name=order.user.name,
        student_email=order.user.email,
        notes=order.notes,
        created_at=order.created_at,
        status_updated_at=order.status_updated_at,
        items=[
            OrderItemResponse(
                menu_item_id=item.menu_item_id,
                name=item.menu_item.name,
                variant_id=item.variant_id,
                variant_name=item.variant.name,
                quantity=item.quantity,
                price=item.price,
            )
            for item in order.items
        ],
    )
