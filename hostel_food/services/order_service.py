"""Order queries for students and managers, and manager status updates."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from hostel_food.models import Order, OrderItem, User
from hostel_food.services.audit_service import log_action
from hostel_food.services.order_status import order_snapshot, set_status
from hostel_food.utils.time import utc_now


def _with_lines(query):
    return query.options(
        selectinload(Order.items).selectinload(OrderItem.menu_item),
        selectinload(Order.items).selectinload(OrderItem.variant),
        selectinload(Order.user),
        selectinload(Order.university),
    )


def list_student_orders(db: Session, user_id: int) -> list[Order]:
    return list(
        db.scalars(
            _with_lines(select(Order))
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
    )


def get_order_by_number(db: Session, order_number: str) -> Order | None:
    return db.scalar(_with_lines(select(Order)).where(Order.order_number == order_number).limit(1))


def list_university_orders(db: Session, university_ids: list[int], status: str) -> list[Order]:
    if not university_ids:
        return []
    return list(
        db.scalars(
            _with_lines(select(Order))
            .where(Order.university_id.in_(university_ids), Order.status == status)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
    )


def update_order_status(db: Session, *, order: Order, new_status: str, actor: User, now: datetime | None = None) -> Order:
    """Apply a manager status change and record it in the audit log."""
    before = order_snapshot(order)
    set_status(order, new_status, now or utc_now())
    log_action(
        db,
        actor=actor,
        action_type="order_status_change",
        entity_type="order",
        entity_id=order.id,
        before_snapshot=before,
        after_snapshot=order_snapshot(order),
    )
    db.commit()
    db.refresh(order)
    return order
