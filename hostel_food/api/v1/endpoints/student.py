"""Student endpoints: menu for a date, cart, checkout and order history."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from hostel_food.auth import require_student
from hostel_food.db.session import get_db
from hostel_food.models import User
from hostel_food.schemas.cart import (
    CartAdd,
    CartDeleteResponse,
    CartItemResponse,
    CartResponse,
    CartUpdate,
    CheckoutRequest,
    serialize_cart_item,
)
from hostel_food.schemas.menu import MenuItemResponse
from hostel_food.schemas.order import OrderResponse, serialize_order
from hostel_food.schemas.settings import StudentSettingsResponse
from hostel_food.services import cart_service
from hostel_food.services.checkout_service import place_order
from hostel_food.services.menu_service import list_available_items_for_date
from hostel_food.services.order_service import get_order_by_number, list_student_orders
from hostel_food.services.scheduling import DATE_KEY_PATTERN, OrderingError, ParseError, to_utc_date_only
from hostel_food.services.security_guards import ensure_can_access_order, resolve_student_university

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


def _scheduled_date(value: str | None):
    if not value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing date")
    if not DATE_KEY_PATTERN.match(value):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid date")
    try:
        return to_utc_date_only(value).date()
    except ParseError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc


@router.get("/menu", response_model=list[MenuItemResponse])
def menu_for_date(
    date_value: str | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
    student: User = Depends(require_student),
) -> list[MenuItemResponse]:
    """Items of the student's university explicitly marked available on the date."""
    menu_date = _scheduled_date(date_value)
    university = resolve_student_university(db, student)
    items = list_available_items_for_date(db, university.id, menu_date)
    return [MenuItemResponse.model_validate(item) for item in items]


@router.get("/cart", response_model=CartResponse)
def get_cart(db: Session = Depends(get_db), student: User = Depends(require_student)) -> CartResponse:
    return CartResponse(items=[serialize_cart_item(line) for line in cart_service.list_cart(db, student.id)])


@router.post("/cart", response_model=CartItemResponse)
def add_to_cart(
    payload: CartAdd,
    db: Session = Depends(get_db),
    student: User = Depends(require_student),
) -> CartItemResponse:
    try:
        line = cart_service.add_to_cart(
            db,
            student=student,
            menu_item_id=payload.menu_item_id,
            variant_id=payload.variant_id,
            quantity=payload.quantity,
            scheduled_date=_scheduled_date(payload.scheduled_for_date),
        )
    except cart_service.InvalidCartItemError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return serialize_cart_item(line)


@router.patch("/cart", response_model=CartItemResponse | CartDeleteResponse)
def update_cart(
    payload: CartUpdate,
    db: Session = Depends(get_db),
    student: User = Depends(require_student),
) -> CartItemResponse | CartDeleteResponse:
    try:
        line = cart_service.update_cart_quantity(
            db,
            user_id=student.id,
            menu_item_id=payload.menu_item_id,
            variant_id=payload.variant_id,
            quantity=payload.quantity,
            scheduled_date=_scheduled_date(payload.scheduled_for_date),
        )
    except cart_service.CartItemNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if line is None:
        return CartDeleteResponse()
    return serialize_cart_item(line)


@router.delete("/cart", response_model=CartDeleteResponse)
def remove_from_cart(
    menu_item_id: int = Query(),
    variant_id: int = Query(),
    scheduled_for_date: str = Query(),
    db: Session = Depends(get_db),
    student: User = Depends(require_student),
) -> CartDeleteResponse:
    try:
        cart_service.remove_cart_item(
            db,
            user_id=student.id,
            menu_item_id=menu_item_id,
            variant_id=variant_id,
            scheduled_date=_scheduled_date(scheduled_for_date),
        )
    except cart_service.CartItemNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CartDeleteResponse()


@router.post("/checkout", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def checkout(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    student: User = Depends(require_student),
) -> OrderResponse:
    try:
        order = place_order(db, student=student, scheduled_for_date=payload.scheduled_for_date)
    except OrderingError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    except Exception as exc:
        logger.exception("[CHECKOUT] Checkout failed for user_id=%s", student.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Checkout failed") from exc
    return serialize_order(order)


@router.get("/orders", response_model=list[OrderResponse])
def my_orders(db: Session = Depends(get_db), student: User = Depends(require_student)) -> list[OrderResponse]:
    return [serialize_order(order) for order in list_student_orders(db, student.id)]


@router.get("/orders/{order_number}", response_model=OrderResponse)
def my_order(
    order_number: str,
    db: Session = Depends(get_db),
    student: User = Depends(require_student),
) -> OrderResponse:
    order = get_order_by_number(db, order_number)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    ensure_can_access_order(student, order, db)
    return serialize_order(order)


@router.get("/settings", response_model=StudentSettingsResponse)
def my_settings(db: Session = Depends(get_db), student: User = Depends(require_student)) -> StudentSettingsResponse:
    university = resolve_student_university(db, student)
    return StudentSettingsResponse(
        university_id=university.id,
        university_name=university.name,
        order_cutoff_time=university.order_cutoff_time,
        max_advance_days=university.max_advance_days,
        timezone=university.timezone,
    )
