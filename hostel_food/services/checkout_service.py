"""Checkout: turn a student's cart for one scheduled date into an order."""

from __future__ import annotations

import logging
import secrets
import string
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from hostel_food.models import CartItem, MenuItemAvailability, Order, OrderItem, University, UniversityManager, User
from hostel_food.services.email_service import (
    EmailNotConfiguredError,
    NewOrderEmail,
    OrderEmailLine,
    send_new_order_email,
)
from hostel_food.services.scheduling import (
    OrderingError,
    UniversityTimeConfig,
    ensure_orderable_date,
    format_date_key,
    to_utc_date_only,
)
from hostel_food.utils.time import as_utc, utc_now

logger = logging.getLogger(__name__)

ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits


class ItemUnavailableError(OrderingError):
    """Raised when a cart line is not explicitly available on the scheduled date."""

    message = "Some items are not available for the selected date"


class EmptyCartError(OrderingError):
    """Raised when there is nothing in the cart for the scheduled date."""

    message = "Cart is empty"


class NoUniversityError(OrderingError):
    """Raised when the student has no university to order from."""

    message = "No university assigned"


def generate_order_number(now: datetime | None = None) -> str:
    """Return an order number like ``ORD-20250314-7KQ2ZD``."""
    current = now or utc_now()
    suffix = "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(6))
    return f"ORD-{current:%Y%m%d}-{suffix}"


def _load_cart_lines(db: Session, user_id: int, scheduled_date: date) -> list[CartItem]:
    return list(
        db.scalars(
            select(CartItem)
            .options(joinedload(CartItem.variant), joinedload(CartItem.menu_item))
            .where(CartItem.user_id == user_id, CartItem.scheduled_for_date == scheduled_date)
            .order_by(CartItem.id.asc())
        ).unique()
    )


def _available_item_ids(db: Session, menu_item_ids: set[int], scheduled_date: date) -> set[int]:
    rows = db.scalars(
        select(MenuItemAvailability.menu_item_id).where(
            MenuItemAvailability.menu_date == scheduled_date,
            MenuItemAvailability.menu_item_id.in_(menu_item_ids),
            MenuItemAvailability.is_available.is_(True),
        )
    )
    return set(rows)


def place_order(
    db: Session,
    *,
    student: User,
    scheduled_for_date: str | date | datetime,
    now: datetime | None = None,
) -> Order:
    """Validate the scheduled date and cart, then write the order and clear that date's cart.

    Raises one of the ``OrderingError`` subclasses for expected rejections. The
    order, its lines and the cart deletion are committed together; any failure
    before the commit rolls everything back.
    """
    current: datetime = as_utc(now or utc_now())
    date_key: datetime = to_utc_date_only(scheduled_for_date)
    scheduled_date: date = date_key.date()

    university: University | None = db.get(University, student.university_id) if student.university_id else None
    if university is None:
        raise NoUniversityError

    ensure_orderable_date(date_key, UniversityTimeConfig.from_university(university), current)

    cart_lines = _load_cart_lines(db, student.id, scheduled_date)
    if not cart_lines:
        raise EmptyCartError

    available_ids = _available_item_ids(db, {line.menu_item_id for line in cart_lines}, scheduled_date)
    if any(line.menu_item_id not in available_ids for line in cart_lines):
        raise ItemUnavailableError

    total = sum((Decimal(line.variant.price) * line.quantity for line in cart_lines), Decimal("0.00"))

    order = Order(
        order_number=generate_order_number(current),
        user_id=student.id,
        university_id=university.id,
        scheduled_for_date=scheduled_date,
        total_amount=total,
        status="PENDING",
        status_updated_at=current,
        created_at=current,
    )
    try:
        db.add(order)
        for line in cart_lines:
            order.items.append(
                OrderItem(
                    menu_item_id=line.menu_item_id,
                    variant_id=line.variant_id,
                    quantity=line.quantity,
                    price=line.variant.price,
                )
            )
        for line in cart_lines:
            db.delete(line)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    logger.info("[CHECKOUT] Order %s placed by user_id=%s total=%s", order.order_number, student.id, total)

    notify_managers_of_order(db, order=order, university=university, student=student)
    return order


def notify_managers_of_order(db: Session, *, order: Order, university: University, student: User) -> None:
    """Email the university's managers about a new order; failures are only logged."""
    try:
        manager_emails = [
            email
            for email in db.scalars(
                select(User.email)
                .join(UniversityManager, UniversityManager.manager_id == User.id)
                .where(UniversityManager.university_id == university.id)
            )
            if email
        ]
        if not manager_emails:
            return

        send_new_order_email(
            manager_emails,
            NewOrderEmail(
                order_number=order.order_number,
                total_amount=Decimal(order.total_amount),
                scheduled_for_date=format_date_key(order.scheduled_for_date),
                university_name=university.name,
                student_name=student.name,
                items=[
                    OrderEmailLine(
                        quantity=item.quantity,
                        name=item.menu_item.name,
                        variant=item.variant.name,
                        price=Decimal(item.price),
                    )
                    for item in order.items
                ],
            ),
        )
    except EmailNotConfiguredError:
        logger.warning("[CHECKOUT] Email is not configured; skipped manager notification for %s", order.order_number)
    except Exception:
        logger.exception("[CHECKOUT] Failed to send manager order notification for %s", order.order_number)
