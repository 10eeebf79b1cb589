"""Authentication endpoint tests: registration, approval-gated login and password reset."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from hostel_food import main as main_module
from hostel_food.core.config import settings
from hostel_food.core.security import hash_reset_token
from hostel_food.db import session as db_session
from hostel_food.db.base import Base
from hostel_food.main import app
from hostel_food.models import University, User
from hostel_food.services import account_service
from hostel_food.services.account_service import InvalidResetTokenError, request_password_reset, reset_password


def _prepare_db(tmp_path: Path, monkeypatch):
    engine = create_engine(f"sqlite:///{tmp_path / 'auth.db'}", connect_args={"check_same_thread": False})
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(main_module, "engine", engine)
    monkeypatch.setattr(main_module, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "app_env", "test")
    with testing_session_local() as db:
        university = University(name="Saigon Tech", code="STU")
        db.add(university)
        db.commit()
    return testing_session_local


def _university_id(session_local) -> int:
    with session_local() as db:
        return db.scalar(select(University.id).where(University.code == "STU"))


def _register(client: TestClient, university_id: int, email: str = "linh@example.com"):
    return client.post(
        "/api/v1/auth/register",
        json={
            "name": "Linh",
            "email": email,
            "phone": "0900000000",
            "university_id": university_id,
            "password": "secret123",
        },
    )


def _set_status(session_local, email: str, status: str) -> None:
    with session_local() as db:
        user = db.scalar(select(User).where(User.email == email))
        user.status = status
        db.commit()


def test_register_creates_pending_student(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        response = _register(client, _university_id(session_local), email="Linh@Example.com")
        duplicate = _register(client, _university_id(session_local), email="linh@example.com")
        bad_university = _register(client, 999, email="other@example.com")

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "linh@example.com"
    assert body["role"] == "STUDENT"
    assert body["status"] == "PENDING"
    assert duplicate.status_code == 409
    assert bad_university.status_code == 400
    assert bad_university.json()["detail"] == "Invalid university selected"


def test_register_validates_payload(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Linh", "email": "not-an-email", "university_id": _university_id(session_local), "password": "short"},
        )

    assert response.status_code == 422


@pytest.mark.parametrize(
    ("status", "expected"),
    [("PENDING", "pending_approval"), ("REJECTED", "rejected"), ("SUSPENDED", "suspended")],
)
def test_login_blocked_until_approved(tmp_path: Path, monkeypatch, status: str, expected: str) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        _register(client, _university_id(session_local))
        _set_status(session_local, "linh@example.com", status)
        response = client.post("/api/v1/auth/login", json={"email": "linh@example.com", "password": "secret123"})

    assert response.status_code == 403
    assert response.json()["detail"]["status"] == expected


def test_login_sets_cookie_and_me_reads_it(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        _register(client, _university_id(session_local))
        _set_status(session_local, "linh@example.com", "APPROVED")
        wrong = client.post("/api/v1/auth/login", json={"email": "linh@example.com", "password": "nope-nope"})
        response = client.post("/api/v1/auth/login", json={"email": "LINH@example.com", "password": "secret123"})
        assert settings.auth_cookie_name in response.cookies

        me = client.get("/api/v1/auth/me")
        bearer = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {response.json()['access_token']}"},
        )
        client.post("/api/v1/auth/logout")
        client.cookies.clear()
        after_logout = client.get("/api/v1/auth/me")

    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Invalid email or password"
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"
    assert response.json()["user"]["status"] == "APPROVED"
    assert me.status_code == 200
    assert me.json()["email"] == "linh@example.com"
    assert bearer.status_code == 200
    assert after_logout.status_code == 401


def test_invalid_token_is_rejected(tmp_path: Path, monkeypatch) -> None:
    _prepare_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_forgot_and_reset_password_flow(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    sent: list[tuple[str, str]] = []
    monkeypatch.setattr(account_service, "send_password_reset_email", lambda to, link: sent.append((to, link)))

    with TestClient(app) as client:
        _register(client, _university_id(session_local))
        _set_status(session_local, "linh@example.com", "APPROVED")

        unknown = client.post("/api/v1/auth/forgot-password", json={"email": "ghost@example.com"})
        known = client.post("/api/v1/auth/forgot-password", json={"email": "linh@example.com"})
        assert unknown.json() == known.json()
        assert len(sent) == 1

        to, link = sent[0]
        token = link.split("token=", 1)[1]
        assert to == "linh@example.com"
        assert link.startswith(f"{settings.app_base_url}/reset-password?token=")

        with session_local() as db:
            user = db.scalar(select(User).where(User.email == "linh@example.com"))
            assert user.reset_token_hash == hash_reset_token(token)
            assert user.reset_token_hash != token

        reset = client.post("/api/v1/auth/reset-password", json={"token": token, "password": "newsecret123"})
        reused = client.post("/api/v1/auth/reset-password", json={"token": token, "password": "another123"})
        login = client.post("/api/v1/auth/login", json={"email": "linh@example.com", "password": "newsecret123"})

    assert reset.status_code == 200
    assert reset.json()["message"] == "Password updated"
    assert reused.status_code == 400
    assert login.status_code == 200


def test_reset_token_expires(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    sent: list[str] = []
    monkeypatch.setattr(account_service, "send_password_reset_email", lambda to, link: sent.append(link))
    issued_at = datetime(2025, 3, 14, 10, 0, tzinfo=timezone.utc)

    with session_local() as db:
        db.add(User(name="Linh", email="linh@example.com", password_hash="x", role="STUDENT", status="APPROVED"))
        db.commit()
        request_password_reset(db, "linh@example.com", now=issued_at)
        token = sent[0].split("token=", 1)[1]

        with pytest.raises(InvalidResetTokenError):
            reset_password(
                db,
                token,
                "newsecret123",
                now=issued_at + timedelta(minutes=settings.password_reset_ttl_minutes + 1),
            )

        user = reset_password(db, token, "newsecret123", now=issued_at + timedelta(minutes=5))
        assert user.reset_token_hash is None
