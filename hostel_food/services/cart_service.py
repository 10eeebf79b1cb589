"""Student cart operations, keyed by scheduled delivery date."""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from hostel_food.models import CartItem, Menu, MenuItem, MenuItemVariant, User


class InvalidCartItemError(Exception):
    """Raised when the item/variant pair cannot be added for this student."""


class CartItemNotFoundError(Exception):
    """Raised when the addressed cart line does not exist."""


def list_cart(db: Session, user_id: int) -> list[CartItem]:
    return list(
        db.scalars(
            select(CartItem)
            .options(joinedload(CartItem.menu_item), joinedload(CartItem.variant))
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at.desc(), CartItem.id.desc())
        ).unique()
    )


def _find_line(db: Session, *, user_id: int, menu_item_id: int, variant_id: int, scheduled_date: date) -> CartItem | None:
    return db.scalar(
        select(CartItem)
        .where(
            CartItem.user_id == user_id,
            CartItem.menu_item_id == menu_item_id,
            CartItem.variant_id == variant_id,
            CartItem.scheduled_for_date == scheduled_date,
        )
        .limit(1)
    )


def add_to_cart(
    db: Session,
    *,
    student: User,
    menu_item_id: int,
    variant_id: int,
    quantity: int,
    scheduled_date: date,
) -> CartItem:
    """Add a line, or increase the quantity of the existing line for the same date."""
    variant: MenuItemVariant | None = db.scalar(
        select(MenuItemVariant)
        .join(MenuItem, MenuItem.id == MenuItemVariant.menu_item_id)
        .join(Menu, Menu.id == MenuItem.menu_id)
        .where(
            MenuItemVariant.id == variant_id,
            MenuItemVariant.menu_item_id == menu_item_id,
            Menu.university_id == student.university_id,
        )
        .limit(1)
    )
    if variant is None:
        raise InvalidCartItemError("Invalid variant")

    line = _find_line(
        db,
        user_id=student.id,
        menu_item_id=menu_item_id,
        variant_id=variant_id,
        scheduled_date=scheduled_date,
    )
    if line is None:
        line = CartItem(
            user_id=student.id,
            menu_item_id=menu_item_id,
            variant_id=variant_id,
            quantity=quantity,
            scheduled_for_date=scheduled_date,
        )
        db.add(line)
    else:
        line.quantity += quantity

    db.commit()
    db.refresh(line)
    return line


def update_cart_quantity(
    db: Session,
    *,
    user_id: int,
    menu_item_id: int,
    variant_id: int,
    quantity: int,
    scheduled_date: date,
) -> CartItem | None:
    """Set a line's quantity; zero removes the line and returns None."""
    line = _find_line(db, user_id=user_id, menu_item_id=menu_item_id, variant_id=variant_id, scheduled_date=scheduled_date)
    if line is None:
        raise CartItemNotFoundError("Cart item not found")

    if quantity == 0:
        db.delete(line)
        db.commit()
        return None

    line.quantity = quantity
    db.commit()
    db.refresh(line)
    return line


def remove_cart_item(db: Session, *, user_id: int, menu_item_id: int, variant_id: int, scheduled_date: date) -> None:
    line = _find_line(db, user_id=user_id, menu_item_id=menu_item_id, variant_id=variant_id, scheduled_date=scheduled_date)
    if line is None:
        raise CartItemNotFoundError("Cart item not found")
    db.delete(line)
    db.commit()
