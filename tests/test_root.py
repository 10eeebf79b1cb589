from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from hostel_food import main as main_module
from hostel_food.core.config import settings
from hostel_food.db import session as db_session
from hostel_food.db.base import Base
from hostel_food.main import app


def test_root_reports_service_status(tmp_path: Path, monkeypatch) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'root.db'}", connect_args={"check_same_thread": False})
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(main_module, "engine", engine)
    monkeypatch.setattr(main_module, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "app_env", "test")

    with TestClient(app) as client:
        response = client.get("/")
        universities = client.get("/api/v1/universities")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": settings.app_name}
    assert universities.json() == []
