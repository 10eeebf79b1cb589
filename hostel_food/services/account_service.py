"""Account provisioning, login checks and password reset."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from hostel_food.core.config import settings
from hostel_food.core.security import generate_reset_token, get_password_hash, hash_reset_token, verify_password
from hostel_food.models import University, User, UserRole, UserStatus
from hostel_food.services.email_service import EmailNotConfiguredError, send_password_reset_email
from hostel_food.services.user_service import create_user, get_user_by_email, get_user_by_reset_token_hash
from hostel_food.utils.time import as_utc, utc_now

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, we have sent a password reset link."

BLOCKED_LOGIN_STATUSES: dict[str, tuple[str, str]] = {
    UserStatus.PENDING.value: ("pending_approval", "Your account is pending approval from your university manager"),
    UserStatus.REJECTED.value: ("rejected", "Your account has been rejected. Please contact your university manager"),
    UserStatus.SUSPENDED.value: ("suspended", "Your account has been suspended. Please contact your university manager"),
}


class AccountExistsError(Exception):
    """Raised when registering an email that is already taken."""


class InvalidUniversityError(Exception):
    """Raised when registering against an unknown university."""


class InvalidCredentialsError(Exception):
    """Raised on unknown email or wrong password."""


class AccountNotApprovedError(Exception):
    """Raised when a correct login belongs to an account that may not sign in."""

    def __init__(self, status: str, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(message)


class InvalidResetTokenError(Exception):
    """Raised when a reset token is unknown or expired."""


def register_student(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    university_id: int,
    phone: str | None = None,
) -> User:
    """Create a student account awaiting manager approval."""
    if get_user_by_email(db, email) is not None:
        raise AccountExistsError("User with this email already exists")
    if db.get(University, university_id) is None:
        raise InvalidUniversityError("Invalid university selected")

    user = create_user(
        db,
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        role=UserRole.STUDENT.value,
        status=UserStatus.PENDING.value,
        phone=phone or None,
        university_id=university_id,
    )
    logger.info("[AUTH] Student registered user_id=%s university_id=%s", user.id, university_id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials, or raise why they may not sign in."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError("Invalid email or password")

    blocked = BLOCKED_LOGIN_STATUSES.get(user.status)
    if blocked is not None:
        status, message = blocked
        raise AccountNotApprovedError(status, message)
    return user


def ensure_default_admin(db: Session) -> bool:
    """Ensure the bootstrap admin account exists.

    Returns:
        bool: True when the admin already existed before this call.
    """
    existing_admin = get_user_by_email(db, settings.admin_email)
    if existing_admin is not None:
        if existing_admin.role != UserRole.ADMIN.value:
            logger.warning(
                "[BOOTSTRAP] Bootstrap email %s belongs to a %s account; leaving it unchanged.",
                existing_admin.email,
                existing_admin.role,
            )
        logger.info("[BOOTSTRAP] Admin exists")
        return True

    create_user(
        db,
        name="Administrator",
        email=settings.admin_email,
        hashed_password=get_password_hash(settings.admin_password),
        role=UserRole.ADMIN.value,
        status=UserStatus.APPROVED.value,
    )
    logger.warning("[SECURITY] Default admin account created: %s. Change default password immediately.", settings.admin_email)
    return False


def request_password_reset(db: Session, email: str, now: datetime | None = None) -> None:
    """Store a hashed reset token for a known email and send the link; unknown emails are ignored."""
    user = get_user_by_email(db, email)
    if user is None:
        return

    token, token_hash = generate_reset_token()
    user.reset_token_hash = token_hash
    user.reset_token_expires_at = as_utc(now or utc_now()) + timedelta(minutes=settings.password_reset_ttl_minutes)
    db.commit()

    reset_link = f"{settings.app_base_url.rstrip('/')}/reset-password?token={token}"
    try:
        send_password_reset_email(user.email, reset_link)
    except EmailNotConfiguredError:
        logger.warning("[AUTH] Email is not configured; password reset email not sent for user_id=%s", user.id)
    except Exception:
        logger.exception("[AUTH] Failed to send password reset email for user_id=%s", user.id)


def reset_password(db: Session, token: str, new_password: str, now: datetime | None = None) -> User:
    user = get_user_by_reset_token_hash(db, hash_reset_token(token))
    if user is None or user.reset_token_expires_at is None:
        raise InvalidResetTokenError("Invalid or expired token")

    expires_at = user.reset_token_expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at <= (now or utc_now()):
        raise InvalidResetTokenError("Invalid or expired token")

    user.password_hash = get_password_hash(new_password)
    user.reset_token_hash = None
    user.reset_token_expires_at = None
    db.commit()
    db.refresh(user)
    logger.info("[AUTH] Password reset completed for user_id=%s", user.id)
    return user
