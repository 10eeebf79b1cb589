"""Order status helpers."""

from __future__ import annotations

from datetime import datetime

from hostel_food.models.order import ORDER_STATUSES, Order

DEFAULT_MANAGER_STATUS_FILTER = "PENDING"


def normalize_order_status(value: str) -> str:
    """Return the canonical status or raise ValueError."""
    normalized = str(value or "").strip().upper()
    if normalized not in ORDER_STATUSES:
        raise ValueError(f"Invalid status: {value}")
    return normalized


def set_status(order: Order, new_status: str, now: datetime) -> None:
    """Set status and stamp the change time.

    Managers may move an order to any status, including back to an earlier one.
    """
    order.status = new_status
    order.status_updated_at = now


def order_snapshot(order: Order) -> dict[str, str]:
    return {
        "order_number": order.order_number,
        "status": order.status,
    }
