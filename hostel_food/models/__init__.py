"""Application models package."""

from hostel_food.models.audit_log import AuditLog
from hostel_food.models.cart import CartItem
from hostel_food.models.menu import Menu, MenuItem, MenuItemAvailability, MenuItemVariant
from hostel_food.models.order import Order, OrderItem
from hostel_food.models.university import University, UniversityManager
from hostel_food.models.user import User, UserRole, UserStatus

__all__ = [
    "AuditLog", "CartItem", "Menu", "MenuItem", "MenuItemAvailability", "MenuItemVariant", "Order", "OrderItem",
    "University", "UniversityManager", "User", "UserRole", "UserStatus",
]
