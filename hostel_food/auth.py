"""Role gating dependencies for the JSON API."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, HTTPException, status

from hostel_food.core.security import get_current_user
from hostel_food.models.user import User, UserRole, UserStatus


def has_role(user: User, *roles: UserRole) -> bool:
    """Return True when the user's role is one of ``roles``."""
    return str(user.role).upper() in {role.value for role in roles}


def require_role(*roles: UserRole) -> Callable[[User], User]:
    """Build a dependency that rejects users outside ``roles`` with 403."""

    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if not has_role(current_user, *roles):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return current_user

    return _checker


require_admin = require_role(UserRole.ADMIN)
require_manager = require_role(UserRole.MANAGER)


def require_student(current_user: User = Depends(require_role(UserRole.STUDENT))) -> User:
    """Students must be approved before they can browse, order or check out."""
    if current_user.status != UserStatus.APPROVED.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is not approved")
    return current_user
