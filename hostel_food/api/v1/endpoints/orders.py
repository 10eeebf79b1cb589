"""Manager order endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from hostel_food.auth import require_manager
from hostel_food.db.session import get_db
from hostel_food.models import Order, User
from hostel_food.schemas.order import OrderResponse, OrderStatusByNumberUpdate, OrderStatusUpdate, serialize_order
from hostel_food.services.order_service import get_order_by_number, list_university_orders, update_order_status
from hostel_food.services.order_status import DEFAULT_MANAGER_STATUS_FILTER, normalize_order_status
from hostel_food.services.security_guards import ensure_can_access_order
from hostel_food.services.university_service import manager_university_ids

router: APIRouter = APIRouter()


@router.get("", response_model=list[OrderResponse])
def list_orders(
    status_filter: str = Query(default=DEFAULT_MANAGER_STATUS_FILTER, alias="status"),
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> list[OrderResponse]:
    try:
        status_value = normalize_order_status(status_filter)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    orders = list_university_orders(db, manager_university_ids(db, manager), status_value)
    return [serialize_order(order) for order in orders]


@router.patch("", response_model=OrderResponse)
def update_order(
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> OrderResponse:
    order: Order | None = db.get(Order, payload.order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    ensure_can_access_order(manager, order, db)
    order = update_order_status(db, order=order, new_status=payload.status, actor=manager)
    return serialize_order(order)


def _get_by_number_or_404(db: Session, manager: User, order_number: str) -> Order:
    order = get_order_by_number(db, order_number)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    ensure_can_access_order(manager, order, db)
    return order


@router.get("/by-number/{order_number}", response_model=OrderResponse)
def get_order(
    order_number: str,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> OrderResponse:
    return serialize_order(_get_by_number_or_404(db, manager, order_number))


@router.patch("/by-number/{order_number}", response_model=OrderResponse)
def update_order_by_number(
    order_number: str,
    payload: OrderStatusByNumberUpdate,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> OrderResponse:
    order = _get_by_number_or_404(db, manager, order_number)
    order = update_order_status(db, order=order, new_status=payload.status, actor=manager)
    return serialize_order(order)
