"""Manager dashboard counters and analytics aggregates."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hostel_food.models import Menu, MenuItem, Order, OrderItem, University, User, UserRole, UserStatus
from hostel_food.utils.time import as_utc, days_ago, today_window_utc, utc_now

STATUS_KEYS: dict[str, str] = {
    "PENDING": "pending",
    "APPROVED": "approved",
    "PREPARING": "preparing",
    "READY_TO_COLLECT": "ready",
    "DELIVERED": "delivered",
    "CANCELLED": "cancelled",
}


def _count_students(db: Session, university_ids: list[int], status: str, start=None, end=None) -> int:
    query = select(func.count(User.id)).where(
        User.role == UserRole.STUDENT.value,
        User.status == status,
        User.university_id.in_(university_ids),
    )
    if start is not None:
        query = query.where(User.created_at >= start)
    if end is not None:
        query = query.where(User.created_at < end)
    return db.scalar(query) or 0


def get_dashboard(db: Session, university_ids: list[int], now: datetime | None = None) -> dict[str, Any]:
    if not university_ids:
        return {"pending_approvals": 0, "menu_items": 0, "active_students": 0, "todays_orders": 0, "universities": []}

    universities = db.scalars(select(University).where(University.id.in_(university_ids)).order_by(University.name.asc()))
    today_start, today_end = today_window_utc(now)
    return {
        "pending_approvals": _count_students(db, university_ids, UserStatus.PENDING.value),
        "menu_items": db.scalar(
            select(func.count(MenuItem.id))
            .join(Menu, Menu.id == MenuItem.menu_id)
            .where(Menu.university_id.in_(university_ids))
        )
        or 0,
        "active_students": _count_students(db, university_ids, UserStatus.APPROVED.value),
        "todays_orders": db.scalar(
            select(func.count(Order.id)).where(
                Order.university_id.in_(university_ids),
                Order.created_at >= today_start,
                Order.created_at < today_end,
            )
        )
        or 0,
        "universities": [
            {"id": university.id, "name": university.name, "is_active": university.is_active}
            for university in universities
        ],
    }


def _growth(current: Decimal | int, previous: Decimal | int) -> float:
    if not previous:
        return 0.0
    return float((Decimal(current) - Decimal(previous)) / Decimal(previous) * 100)


def _month_start(value: datetime, months_back: int) -> datetime:
    month_index = value.year * 12 + (value.month - 1) - months_back
    return datetime(month_index // 12, month_index % 12 + 1, 1, tzinfo=timezone.utc)


def _order_totals(db: Session, university_ids: list[int], start: datetime, end: datetime) -> list[tuple[datetime, Decimal, str]]:
    rows = db.execute(
        select(Order.created_at, Order.total_amount, Order.status).where(
            Order.university_id.in_(university_ids),
            Order.created_at >= start,
            Order.created_at < end,
        )
    )
    return [(created_at, Decimal(total), status) for created_at, total, status in rows]


def _empty_analytics() -> dict[str, Any]:
    return {
        "overview": {
            "total_revenue": 0.0,
            "total_orders": 0,
            "total_students": 0,
            "average_order_value": 0.0,
            "revenue_growth": 0.0,
            "orders_growth": 0.0,
            "students_growth": 0.0,
        },
        "orders_by_status": {key: 0 for key in STATUS_KEYS.values()},
        "popular_items": [],
        "daily_stats": [],
        "monthly_stats": [],
    }


def get_analytics(db: Session, university_ids: list[int], timeframe_days: int = 30, now: datetime | None = None) -> dict[str, Any]:
    """Aggregate revenue, orders and sign-ups for the last ``timeframe_days`` against the period before."""
    if not university_ids:
        return _empty_analytics()

    current_time = as_utc(now or utc_now())
    start = days_ago(timeframe_days, current_time)
    previous_start = start - timedelta(days=timeframe_days)

    current_orders = _order_totals(db, university_ids, start, current_time)
    previous_orders = _order_totals(db, university_ids, previous_start, start)
    current_revenue = sum((total for _, total, _ in current_orders), Decimal("0"))
    previous_revenue = sum((total for _, total, _ in previous_orders), Decimal("0"))

    total_students = _count_students(db, university_ids, UserStatus.APPROVED.value, start, current_time)
    previous_students = _count_students(db, university_ids, UserStatus.APPROVED.value, previous_start, start)

    status_counts = {key: 0 for key in STATUS_KEYS.values()}
    for _, _, status in current_orders:
        status_counts[STATUS_KEYS[status]] += 1

    popular_rows = db.execute(
        select(
            OrderItem.menu_item_id,
            MenuItem.name,
            MenuItem.category,
            func.sum(OrderItem.quantity).label("total_quantity"),
            func.sum(OrderItem.price * OrderItem.quantity).label("total_revenue"),
        )
        .join(Order, Order.id == OrderItem.order_id)
        .join(MenuItem, MenuItem.id == OrderItem.menu_item_id)
        .where(Order.university_id.in_(university_ids), Order.created_at >= start)
        .group_by(OrderItem.menu_item_id, MenuItem.name, MenuItem.category)
        .order_by(func.sum(OrderItem.quantity).desc())
        .limit(10)
    )
    popular_items = [
        {
            "id": menu_item_id,
            "name": name,
            "category": category or "Uncategorized",
            "total_orders": int(total_quantity or 0),
            "total_revenue": float(total_revenue or 0),
        }
        for menu_item_id, name, category, total_quantity, total_revenue in popular_rows
    ]

    daily: dict[str, dict[str, Any]] = defaultdict(lambda: {"orders": 0, "revenue": Decimal("0")})
    for created_at, total, _ in _order_totals(db, university_ids, days_ago(30, current_time), current_time):
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        bucket = daily[created_at.date().isoformat()]
        bucket["orders"] += 1
        bucket["revenue"] += total
    daily_stats = []
    for offset in range(29, -1, -1):
        key = (current_time - timedelta(days=offset)).date().isoformat()
        bucket = daily.get(key, {"orders": 0, "revenue": Decimal("0")})
        daily_stats.append({"date": key, "orders": bucket["orders"], "revenue": float(bucket["revenue"])})

    monthly_stats = []
    for months_back in range(11, -1, -1):
        month_start = _month_start(current_time, months_back)
        month_end = _month_start(current_time, months_back - 1)
        month_orders = _order_totals(db, university_ids, month_start, month_end)
        monthly_stats.append(
            {
                "month": month_start.strftime("%b %Y"),
                "orders": len(month_orders),
                "revenue": float(sum((total for _, total, _ in month_orders), Decimal("0"))),
                "students": _count_students(db, university_ids, UserStatus.APPROVED.value, month_start, month_end),
            }
        )

    return {
        "overview": {
            "total_revenue": float(current_revenue),
            "total_orders": len(current_orders),
            "total_students": total_students,
            "average_order_value": float(current_revenue / len(current_orders)) if current_orders else 0.0,
            "revenue_growth": _growth(current_revenue, previous_revenue),
            "orders_growth": _growth(len(current_orders), len(previous_orders)),
            "students_growth": _growth(total_students, previous_students),
        },
        "orders_by_status": status_counts,
        "popular_items": popular_items,
        "daily_stats": daily_stats,
        "monthly_stats": monthly_stats,
    }
