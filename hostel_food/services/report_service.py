"""Manager reports over a created-at date range: orders, students, revenue, menu performance."""

from __future__ import annotations

import csv
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from io import StringIO

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from hostel_food.models import MenuItem, Order, OrderItem, User, UserRole

REPORT_TYPES = ("orders", "students", "revenue", "menu-performance")
REPORT_FORMATS = ("csv", "json", "pdf")
REVENUE_STATUSES = ("APPROVED", "PREPARING", "READY_TO_COLLECT", "DELIVERED")


class InvalidReportError(ValueError):
    pass


@dataclass
class Report:
    report_type: str
    filename: str
    headers: list[str]
    rows: list[dict[str, str | int]] = field(default_factory=list)


def _money(value: Decimal | int | float) -> str:
    return f"{Decimal(value):.2f}"


def _range_bounds(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """Return [start 00:00 UTC, day after end 00:00 UTC) so the whole end date is included."""
    start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
    return start, end


def _day_key(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).date().isoformat()


def _orders_report(db: Session, university_ids: list[int], start: datetime, end: datetime) -> Report:
    orders = db.scalars(
        select(Order)
        .options(
            selectinload(Order.user),
            selectinload(Order.university),
            selectinload(Order.items).selectinload(OrderItem.menu_item),
            selectinload(Order.items).selectinload(OrderItem.variant),
        )
        .where(Order.university_id.in_(university_ids), Order.created_at >= start, Order.created_at < end)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    report = Report(
        report_type="orders",
        filename="orders-report",
        headers=[
            "Order Number", "Customer Name", "Customer Email", "Customer Phone", "Items",
            "Total Amount", "Status", "University", "Scheduled For", "Order Date",
        ],
    )
    for order in orders:
        report.rows.append(
            {
                "Order Number": order.order_number,
                "Customer Name": order.user.name,
                "Customer Email": order.user.email,
                "Customer Phone": order.user.phone or "N/A",
                "Items": "; ".join(
                    f"{item.quantity}x {item.menu_item.name} ({item.variant.name})" for item in order.items
                ),
                "Total Amount": _money(order.total_amount),
                "Status": order.status,
                "University": order.university.name,
                "Scheduled For": order.scheduled_for_date.isoformat(),
                "Order Date": _day_key(order.created_at),
            }
        )
    return report


def _students_report(db: Session, university_ids: list[int], start: datetime, end: datetime) -> Report:
    students = db.scalars(
        select(User)
        .options(selectinload(User.university))
        .where(
            User.role == UserRole.STUDENT.value,
            User.university_id.in_(university_ids),
            User.created_at >= start,
            User.created_at < end,
        )
        .order_by(User.created_at.desc(), User.id.desc())
    )
    report = Report(
        report_type="students",
        filename="students-report",
        headers=["Name", "Email", "Phone", "Status", "Registration Date", "University"],
    )
    for student in students:
        university = student.university
        university_label = ""
        if university is not None:
            university_label = f"{university.name} ({university.code})" if university.code else university.name
        report.rows.append(
            {
                "Name": student.name,
                "Email": student.email,
                "Phone": student.phone or "N/A",
                "Status": student.status,
                "Registration Date": _day_key(student.created_at),
                "University": university_label,
            }
        )
    return report


def _revenue_report(db: Session, university_ids: list[int], start: datetime, end: datetime) -> Report:
    orders = db.execute(
        select(Order.created_at, Order.total_amount).where(
            Order.university_id.in_(university_ids),
            Order.created_at >= start,
            Order.created_at < end,
            Order.status.in_(REVENUE_STATUSES),
        )
    )
    by_day: dict[str, list[Decimal]] = defaultdict(list)
    for created_at, total_amount in orders:
        by_day[_day_key(created_at)].append(Decimal(total_amount))

    report = Report(
        report_type="revenue",
        filename="revenue-report",
        headers=["Date", "Orders Count", "Total Revenue", "Average Order Value"],
    )
    for day in sorted(by_day):
        totals = by_day[day]
        revenue = sum(totals, Decimal("0"))
        report.rows.append(
            {
                "Date": day,
                "Orders Count": len(totals),
                "Total Revenue": _money(revenue),
                "Average Order Value": _money(revenue / len(totals)),
            }
        )
    return report


def _menu_performance_report(db: Session, university_ids: list[int], start: datetime, end: datetime) -> Report:
    lines = db.execute(
        select(OrderItem.menu_item_id, OrderItem.quantity, OrderItem.price)
        .join(Order, Order.id == OrderItem.order_id)
        .where(Order.university_id.in_(university_ids), Order.created_at >= start, Order.created_at < end)
    )
    quantities: dict[int, int] = defaultdict(int)
    revenue: dict[int, Decimal] = defaultdict(Decimal)
    for menu_item_id, quantity, price in lines:
        quantities[menu_item_id] += quantity
        revenue[menu_item_id] += Decimal(price) * quantity

    items = {
        item.id: item
        for item in db.scalars(select(MenuItem).where(MenuItem.id.in_(list(quantities))))
    } if quantities else {}

    ranked = sorted(quantities, key=lambda item_id: (-quantities[item_id], item_id))
    report = Report(
        report_type="menu-performance",
        filename="menu-performance-report",
        headers=["Item Name", "Category", "Total Orders", "Revenue", "Popularity Rank"],
    )
    for rank, item_id in enumerate(ranked, start=1):
        item = items.get(item_id)
        report.rows.append(
            {
                "Item Name": item.name if item else "Unknown Item",
                "Category": (item.category if item else None) or "Uncategorized",
                "Total Orders": quantities[item_id],
                "Revenue": _money(revenue[item_id]),
                "Popularity Rank": rank,
            }
        )
    return report


_BUILDERS = {
    "orders": _orders_report,
    "students": _students_report,
    "revenue": _revenue_report,
    "menu-performance": _menu_performance_report,
}


def build_report(db: Session, *, university_ids: list[int], report_type: str, start_date: date, end_date: date) -> Report:
    builder = _BUILDERS.get(report_type)
    if builder is None:
        raise InvalidReportError("Invalid report type")
    if end_date < start_date:
        raise InvalidReportError("end_date must not be before start_date")
    start, end = _range_bounds(start_date, end_date)
    report = builder(db, university_ids, start, end)
    report.filename = f"{report.filename}-{start_date.isoformat()}-to-{end_date.isoformat()}"
    return report


def render_csv(report: Report) -> str:
    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=report.headers, lineterminator="\n")
    writer.writeheader()
    writer.writerows(report.rows)
    return output.getvalue()
