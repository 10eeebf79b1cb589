"""User service operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostel_food.models.user import User, UserStatus, normalize_user_role


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == normalize_email(email)).limit(1))


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_reset_token_hash(db: Session, token_hash: str) -> User | None:
    return db.scalar(select(User).where(User.reset_token_hash == token_hash).limit(1))


def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    hashed_password: str,
    role: str,
    status: str = UserStatus.PENDING.value,
    phone: str | None = None,
    university_id: int | None = None,
    commit: bool = True,
) -> User:
    user = User(
        name=name.strip(),
        email=normalize_email(email),
        password_hash=hashed_password,
        role=normalize_user_role(role),
        status=status,
        phone=phone,
        university_id=university_id,
    )
    db.add(user)
    if commit:
        db.commit()
        db.refresh(user)
    else:
        db.flush()
    return user
