"""Schema exports."""

from hostel_food.schemas.auth import (
    AuthUserResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from hostel_food.schemas.cart import CartAdd, CartItemResponse, CartResponse, CartUpdate, CheckoutRequest
from hostel_food.schemas.menu import (
    AvailabilityItem,
    AvailabilityResponse,
    AvailabilityUpdate,
    MenuCreate,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    MenuResponse,
    VariantPayload,
)
from hostel_food.schemas.order import OrderItemResponse, OrderResponse, OrderStatusByNumberUpdate, OrderStatusUpdate
from hostel_food.schemas.settings import StudentSettingsResponse, TimeSettings
from hostel_food.schemas.student import StudentAction, StudentActionResponse, StudentResponse
from hostel_food.schemas.university import (
    ManagerCreate,
    ManagerResponse,
    UniversityCounts,
    UniversityCreate,
    UniversityOption,
    UniversityResponse,
    UniversityUpdate,
)

__all__ = [
    "AuthUserResponse",
    "AvailabilityItem",
    "AvailabilityResponse",
    "AvailabilityUpdate",
    "CartAdd",
    "CartItemResponse",
    "CartResponse",
    "CartUpdate",
    "CheckoutRequest",
    "ForgotPasswordRequest",
    "LoginRequest",
    "ManagerCreate",
    "ManagerResponse",
    "MenuCreate",
    "MenuItemCreate",
    "MenuItemResponse",
    "MenuItemUpdate",
    "MenuResponse",
    "MessageResponse",
    "OrderItemResponse",
    "OrderResponse",
    "OrderStatusByNumberUpdate",
    "OrderStatusUpdate",
    "RegisterRequest",
    "ResetPasswordRequest",
    "StudentAction",
    "StudentActionResponse",
    "StudentResponse",
    "StudentSettingsResponse",
    "TimeSettings",
    "TokenResponse",
    "UniversityCounts",
    "UniversityCreate",
    "UniversityOption",
    "UniversityResponse",
    "UniversityUpdate",
    "VariantPayload",
]
