"""Manager endpoints: dashboard, menus, menu items, availability and time settings."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from hostel_food.auth import require_manager
from hostel_food.db.session import get_db
from hostel_food.models import Menu, MenuItem, User
from hostel_food.schemas.auth import MessageResponse
from hostel_food.schemas.menu import (
    AvailabilityItem,
    AvailabilityResponse,
    AvailabilityUpdate,
    MenuCreate,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    MenuResponse,
)
from hostel_food.schemas.settings import TimeSettings
from hostel_food.services import menu_service
from hostel_food.services.analytics_service import get_dashboard
from hostel_food.services.menu_service import MenuItemInUseError, MenuValidationError, VariantInput
from hostel_food.services.scheduling import DATE_KEY_PATTERN, ParseError, UniversityTimeConfig, format_date_key, to_utc_date_only
from hostel_food.services.security_guards import ensure_manager_access, resolve_manager_university
from hostel_food.services.settings_service import get_time_config, save_time_config
from hostel_food.services.university_service import manager_university_ids

router: APIRouter = APIRouter()


def _parse_date_key(value: str | None):
    if not value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing date")
    if not DATE_KEY_PATTERN.match(value):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid date")
    try:
        return to_utc_date_only(value)
    except ParseError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc


def _get_managed_item(db: Session, manager: User, identifier: str | int) -> MenuItem:
    item = menu_service.get_menu_item(db, identifier, manager_university_ids(db, manager))
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found")
    ensure_manager_access(db, manager, item.menu.university_id)
    return item


@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db), manager: User = Depends(require_manager)) -> dict[str, Any]:
    return get_dashboard(db, manager_university_ids(db, manager))


@router.get("/menus", response_model=list[MenuResponse])
def list_menus(db: Session = Depends(get_db), manager: User = Depends(require_manager)) -> list[MenuResponse]:
    return [MenuResponse.model_validate(menu) for menu in menu_service.list_menus(db, manager_university_ids(db, manager))]


@router.post("/menus", response_model=MenuResponse, status_code=status.HTTP_201_CREATED)
def create_menu(
    payload: MenuCreate,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> MenuResponse:
    university_id = payload.university_id or resolve_manager_university(db, manager).id
    ensure_manager_access(db, manager, university_id)
    menu = menu_service.create_menu(db, university_id=university_id, name=payload.name, description=payload.description)
    return MenuResponse.model_validate(menu)


@router.post("/menu/items", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    payload: MenuItemCreate,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> MenuItemResponse:
    menu: Menu | None = db.get(Menu, payload.menu_id)
    if menu is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu not found")
    ensure_manager_access(db, manager, menu.university_id)
    try:
        item = menu_service.create_menu_item(
            db,
            menu=menu,
            name=payload.name,
            description=payload.description,
            category=payload.category,
            food_type=payload.food_type,
            image=payload.image,
            variants=[
                VariantInput(name=variant.name, price=variant.price, is_default=variant.is_default)
                for variant in payload.variants
            ],
        )
    except MenuValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MenuItemResponse.model_validate(item)


@router.get("/menu/items/{identifier}", response_model=MenuItemResponse)
def get_menu_item(
    identifier: str,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> MenuItemResponse:
    return MenuItemResponse.model_validate(_get_managed_item(db, manager, identifier))


@router.patch("/menu/items/{item_id}", response_model=MenuItemResponse)
def update_menu_item(
    item_id: int,
    payload: MenuItemUpdate,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> MenuItemResponse:
    item = _get_managed_item(db, manager, item_id)
    item = menu_service.update_menu_item(db, item, payload.model_dump(exclude_unset=True))
    return MenuItemResponse.model_validate(item)


@router.delete("/menu/items/{item_id}", response_model=MessageResponse)
def delete_menu_item(
    item_id: int,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> MessageResponse:
    item = _get_managed_item(db, manager, item_id)
    try:
        menu_service.delete_menu_item(db, item)
    except MenuItemInUseError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": str(exc), "details": exc.references},
        ) from exc
    return MessageResponse(message="Menu item deleted successfully")


@router.get("/menu/availability", response_model=list[AvailabilityItem])
def get_availability(
    date_value: str | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> list[AvailabilityItem]:
    date_key = _parse_date_key(date_value)
    rows = menu_service.list_availability_for_date(db, manager_university_ids(db, manager), date_key.date())
    return [
        AvailabilityItem(
            id=item.id,
            menu_id=item.menu_id,
            name=item.name,
            category=item.category,
            is_available=is_available,
        )
        for item, is_available in rows
    ]


@router.patch("/menu/availability", response_model=AvailabilityResponse)
def update_availability(
    payload: AvailabilityUpdate,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> AvailabilityResponse:
    """Mark one item available or unavailable on any date; no ordering window applies here."""
    date_key = _parse_date_key(payload.date)
    item = _get_managed_item(db, manager, payload.menu_item_id)
    row = menu_service.set_item_availability(
        db,
        menu_item_id=item.id,
        menu_date=date_key.date(),
        is_available=payload.is_available,
    )
    return AvailabilityResponse(
        menu_item_id=row.menu_item_id,
        date=format_date_key(row.menu_date),
        is_available=row.is_available,
    )


@router.get("/settings", response_model=TimeSettings)
def get_settings(db: Session = Depends(get_db), manager: User = Depends(require_manager)) -> TimeSettings:
    config = get_time_config(resolve_manager_university(db, manager))
    return TimeSettings(
        order_cutoff_time=config.order_cutoff_time,
        max_advance_days=config.max_advance_days,
        timezone=config.timezone,
    )


@router.patch("/settings", response_model=TimeSettings)
def update_settings(
    payload: TimeSettings,
    db: Session = Depends(get_db),
    manager: User = Depends(require_manager),
) -> TimeSettings:
    university = resolve_manager_university(db, manager)
    config = save_time_config(
        db,
        university=university,
        config=UniversityTimeConfig(
            timezone=payload.timezone,
            order_cutoff_time=payload.order_cutoff_time,
            max_advance_days=payload.max_advance_days,
        ),
        actor=manager,
    )
    return TimeSettings(
        order_cutoff_time=config.order_cutoff_time,
        max_advance_days=config.max_advance_days,
        timezone=config.timezone,
    )
