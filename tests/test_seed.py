"""Database seed and bootstrap behavior tests."""

from pathlib import Path

from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from hostel_food.core.config import settings
from hostel_food.db.base import Base
from hostel_food.db.seed import DEMO_UNIVERSITY_NAME, ensure_seed_data
from hostel_food.models import MenuItem, University, User
from hostel_food.services.account_service import ensure_default_admin
from hostel_food.utils.slug import slugify, unique_slug


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def test_seed_creates_demo_university_in_dev_only(tmp_path: Path, monkeypatch) -> None:
    """Seed data should be created once in development and never elsewhere."""
    engine = _build_test_engine(tmp_path / "seed.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(settings, "app_env", "prod")
    with testing_session_local() as session:
        ensure_seed_data(session)
        assert session.scalar(select(func.count(University.id))) == 0

    monkeypatch.setattr(settings, "app_env", "dev")
    with testing_session_local() as session:
        ensure_seed_data(session)
        ensure_seed_data(session)

    with testing_session_local() as session:
        universities = session.scalars(select(University)).all()
        assert [university.name for university in universities] == [DEMO_UNIVERSITY_NAME]
        assert session.scalar(select(func.count(MenuItem.id))) == 2


def test_default_admin_bootstrap_is_idempotent(tmp_path: Path, monkeypatch) -> None:
    """Bootstrap should create the admin once and report it as present afterwards."""
    engine = _build_test_engine(tmp_path / "admin.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(settings, "admin_email", "Root@Hostel.dev")

    with testing_session_local() as session:
        assert ensure_default_admin(session) is False
        assert ensure_default_admin(session) is True

    with testing_session_local() as session:
        admins = session.scalars(select(User).where(User.role == "ADMIN")).all()
        assert [admin.email for admin in admins] == ["root@hostel.dev"]


def test_slug_helpers() -> None:
    assert slugify("Cơm Gà  Xối Mỡ!") == "com-ga-xoi-mo"
    assert slugify("!!!") == "item"
    assert unique_slug("pho", {"pho", "pho-1"}) == "pho-2"
