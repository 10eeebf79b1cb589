"""Menu, menu item and per-date availability operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from hostel_food.models import CartItem, Menu, MenuItem, MenuItemAvailability, MenuItemVariant, OrderItem
from hostel_food.utils.slug import slugify, unique_slug


class MenuValidationError(Exception):
    """Raised for invalid menu item payloads."""


class MenuItemInUseError(Exception):
    def __init__(self, references: dict[str, int]) -> None:
        super().__init__("Menu item is referenced by existing orders or carts")
        self.references = references


@dataclass(frozen=True)
class VariantInput:
    name: str
    price: Decimal
    is_default: bool


def list_menus(db: Session, university_ids: list[int]) -> list[Menu]:
    if not university_ids:
        return []
    return list(
        db.scalars(
            select(Menu)
            .options(selectinload(Menu.items).selectinload(MenuItem.variants))
            .where(Menu.university_id.in_(university_ids))
            .order_by(Menu.created_at.desc(), Menu.id.desc())
        )
    )


def create_menu(db: Session, *, university_id: int, name: str, description: str | None = None) -> Menu:
    menu = Menu(university_id=university_id, name=name.strip(), description=description)
    db.add(menu)
    db.commit()
    db.refresh(menu)
    return menu


def list_university_items(db: Session, university_id: int) -> list[MenuItem]:
    """Return every menu item across the university's menus, newest first."""
    return list(
        db.scalars(
            select(MenuItem)
            .join(Menu, Menu.id == MenuItem.menu_id)
            .options(selectinload(MenuItem.variants))
            .where(Menu.university_id == university_id)
            .order_by(MenuItem.created_at.desc(), MenuItem.id.desc())
        )
    )


def availability_map(db: Session, menu_item_ids: list[int], menu_date: date) -> dict[int, bool]:
    if not menu_item_ids:
        return {}
    rows = db.execute(
        select(MenuItemAvailability.menu_item_id, MenuItemAvailability.is_available).where(
            MenuItemAvailability.menu_date == menu_date,
            MenuItemAvailability.menu_item_id.in_(menu_item_ids),
        )
    )
    return {menu_item_id: is_available for menu_item_id, is_available in rows}


def list_available_items_for_date(db: Session, university_id: int, menu_date: date) -> list[MenuItem]:
    """Return items explicitly marked available on ``menu_date``; unmarked dates show nothing."""
    items = list_university_items(db, university_id)
    available = availability_map(db, [item.id for item in items], menu_date)
    return [item for item in items if available.get(item.id) is True]


def list_availability_for_date(db: Session, university_ids: list[int], menu_date: date) -> list[tuple[MenuItem, bool]]:
    """Return every item of the given universities with its flag for ``menu_date`` (unmarked is False)."""
    if not university_ids:
        return []
    items = list(
        db.scalars(
            select(MenuItem)
            .join(Menu, Menu.id == MenuItem.menu_id)
            .where(Menu.university_id.in_(university_ids))
            .order_by(MenuItem.name.asc(), MenuItem.id.asc())
        )
    )
    available = availability_map(db, [item.id for item in items], menu_date)
    return [(item, available.get(item.id, False)) for item in items]


def set_item_availability(db: Session, *, menu_item_id: int, menu_date: date, is_available: bool) -> MenuItemAvailability:
    """Create or update the availability flag for one item on one date."""
    row: MenuItemAvailability | None = (
        db.query(MenuItemAvailability)
        .filter(
            MenuItemAvailability.menu_item_id == menu_item_id,
            MenuItemAvailability.menu_date == menu_date,
        )
        .first()
    )
    if row is None:
        row = MenuItemAvailability(menu_item_id=menu_item_id, menu_date=menu_date, is_available=is_available)
        db.add(row)
    else:
        row.is_available = is_available

    db.commit()
    db.refresh(row)
    return row


def _validate_variants(variants: list[VariantInput]) -> None:
    if not variants:
        raise MenuValidationError("At least one variant is required")
    if not any(variant.is_default for variant in variants):
        raise MenuValidationError("At least one variant must be default")


def create_menu_item(
    db: Session,
    *,
    menu: Menu,
    name: str,
    variants: list[VariantInput],
    description: str | None = None,
    category: str | None = None,
    food_type: str = "VEG",
    image: str | None = None,
) -> MenuItem:
    """Create an item with its variants and a slug unique within the menu."""
    _validate_variants(variants)
    existing_slugs = set(db.scalars(select(MenuItem.slug).where(MenuItem.menu_id == menu.id)))

    item = MenuItem(
        menu_id=menu.id,
        name=name.strip(),
        slug=unique_slug(slugify(name), existing_slugs),
        description=description,
        category=category,
        food_type=food_type,
        image=image,
        variants=[
            MenuItemVariant(name=variant.name, price=variant.price, is_default=variant.is_default)
            for variant in variants
        ],
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def get_menu_item(db: Session, identifier: str | int, university_ids: list[int] | None = None) -> MenuItem | None:
    """Look an item up by numeric id, falling back to slug.

    Slugs are only unique within a menu, so slug lookups are restricted to
    ``university_ids`` when given.
    """
    if isinstance(identifier, int) or str(identifier).isdigit():
        item = db.get(MenuItem, int(identifier))
        if item is not None:
            return item
    query = select(MenuItem).where(MenuItem.slug == str(identifier))
    if university_ids is not None:
        query = query.join(Menu, Menu.id == MenuItem.menu_id).where(Menu.university_id.in_(university_ids))
    return db.scalar(query.order_by(MenuItem.id.asc()).limit(1))


def update_menu_item(db: Session, item: MenuItem, changes: dict) -> MenuItem:
    for field in ("name", "description", "category", "food_type", "image", "is_available"):
        if field in changes:
            setattr(item, field, changes[field])
    db.commit()
    db.refresh(item)
    return item


def menu_item_references(db: Session, item: MenuItem) -> dict[str, int]:
    """Count order lines and cart lines pointing at the item or one of its variants."""
    variant_ids = [variant.id for variant in item.variants]
    order_lines = db.scalar(
        select(func.count(OrderItem.id)).where(
            or_(OrderItem.menu_item_id == item.id, OrderItem.variant_id.in_(variant_ids))
        )
    )
    cart_lines = db.scalar(
        select(func.count(CartItem.id)).where(
            or_(CartItem.menu_item_id == item.id, CartItem.variant_id.in_(variant_ids))
        )
    )
    return {"order_lines": order_lines or 0, "cart_lines": cart_lines or 0}


def delete_menu_item(db: Session, item: MenuItem) -> None:
    """Delete an item nobody has ordered or carted; otherwise raise ``MenuItemInUseError``."""
    references = menu_item_references(db, item)
    if any(references.values()):
        raise MenuItemInUseError(references)
    db.delete(item)
    db.commit()
