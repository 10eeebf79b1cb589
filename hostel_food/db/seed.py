"""Development seed data."""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostel_food.core.config import settings
from hostel_food.models import Menu, University
from hostel_food.services.menu_service import VariantInput, create_menu, create_menu_item

logger = logging.getLogger(__name__)

DEMO_UNIVERSITY_NAME = "Demo University"


def ensure_seed_data(session: Session) -> None:
    """Create a demo university with a small menu, in development only."""
    if settings.app_env != "dev":
        return

    if session.scalar(select(University.id).limit(1)) is not None:
        return

    university = University(name=DEMO_UNIVERSITY_NAME, code="DEMO", location="Main campus")
    session.add(university)
    session.commit()
    session.refresh(university)

    menu: Menu = create_menu(session, university_id=university.id, name="Daily menu")
    create_menu_item(
        session,
        menu=menu,
        name="Fried rice",
        category="Mains",
        variants=[
            VariantInput(name="Regular", price=Decimal("30.00"), is_default=True),
            VariantInput(name="Large", price=Decimal("50.00"), is_default=False),
        ],
    )
    create_menu_item(
        session,
        menu=menu,
        name="Chicken curry",
        category="Mains",
        food_type="NON_VEG",
        variants=[VariantInput(name="Regular", price=Decimal("45.00"), is_default=True)],
    )
    logger.info("[SEED] created demo university id=%s", university.id)
