"""Cart ORM model."""

from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_food.db.base import Base


class CartItem(Base):
    """Pending line for a student, scoped to one scheduled delivery date."""

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "menu_item_id",
            "variant_id",
            "scheduled_for_date",
            name="uq_cart_items_user_item_variant_date",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    menu_item_id: Mapped[int] = mapped_column(ForeignKey("menu_items.id"), nullable=False)
    variant_id: Mapped[int] = mapped_column(ForeignKey("menu_item_variants.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    scheduled_for_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    menu_item: Mapped["MenuItem"] = relationship()
    variant: Mapped["MenuItemVariant"] = relationship()
