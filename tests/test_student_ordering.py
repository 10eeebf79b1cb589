"""Student API flow: date menu, cart, checkout and order history."""

from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from hostel_food import main as main_module
from hostel_food.core.config import settings
from hostel_food.core.security import create_access_token, get_password_hash
from hostel_food.db import session as db_session
from hostel_food.db.base import Base
from hostel_food.main import app
from hostel_food.models import CartItem, Menu, MenuItem, MenuItemAvailability, MenuItemVariant, Order, University, User

HCM = ZoneInfo("Asia/Ho_Chi_Minh")


def _prepare_db(tmp_path: Path, monkeypatch):
    engine = create_engine(f"sqlite:///{tmp_path / 'student.db'}", connect_args={"check_same_thread": False})
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(main_module, "engine", engine)
    monkeypatch.setattr(main_module, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "app_env", "test")
    return testing_session_local


def _headers(user_id: int, role: str = "STUDENT") -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user_id), 'role': role})}"}


def _local_today() -> date:
    return datetime.now(HCM).date()


def _seed(session_local, *, available_on: date | None = None) -> dict[str, int]:
    with session_local() as db:
        university = University(name="Saigon Tech", code="STU", timezone="Asia/Ho_Chi_Minh", order_cutoff_time="20:00", max_advance_days=7)
        other = University(name="Hanoi Poly", code="HNP", timezone="Asia/Ho_Chi_Minh")
        db.add_all([university, other])
        db.flush()

        student = User(
            name="Linh",
            email="linh@example.com",
            password_hash=get_password_hash("secret123"),
            role="STUDENT",
            status="APPROVED",
            university_id=university.id,
        )
        pending = User(
            name="Pending",
            email="pending@example.com",
            password_hash=get_password_hash("secret123"),
            role="STUDENT",
            status="PENDING",
            university_id=university.id,
        )
        menu = Menu(university_id=university.id, name="Daily")
        other_menu = Menu(university_id=other.id, name="Other")
        db.add_all([student, pending, menu, other_menu])
        db.flush()

        rice = MenuItem(menu_id=menu.id, name="Fried rice", slug="fried-rice")
        noodles = MenuItem(menu_id=menu.id, name="Noodles", slug="noodles")
        foreign = MenuItem(menu_id=other_menu.id, name="Bun cha", slug="bun-cha")
        db.add_all([rice, noodles, foreign])
        db.flush()

        rice_variant = MenuItemVariant(menu_item_id=rice.id, name="Regular", price=Decimal("30.00"), is_default=True)
        noodles_variant = MenuItemVariant(menu_item_id=noodles.id, name="Regular", price=Decimal("40.00"), is_default=True)
        foreign_variant = MenuItemVariant(menu_item_id=foreign.id, name="Regular", price=Decimal("25.00"), is_default=True)
        db.add_all([rice_variant, noodles_variant, foreign_variant])
        db.flush()

        if available_on is not None:
            db.add(MenuItemAvailability(menu_item_id=rice.id, menu_date=available_on, is_available=True))
            db.add(MenuItemAvailability(menu_item_id=noodles.id, menu_date=available_on, is_available=False))
        db.commit()
        return {
            "student": student.id,
            "pending": pending.id,
            "rice": rice.id,
            "rice_variant": rice_variant.id,
            "noodles": noodles.id,
            "noodles_variant": noodles_variant.id,
            "foreign": foreign.id,
            "foreign_variant": foreign_variant.id,
        }


def test_menu_lists_only_items_marked_available(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    target = _local_today() + timedelta(days=2)
    ids = _seed(session_local, available_on=target)

    with TestClient(app) as client:
        response = client.get(f"/api/v1/student/menu?date={target.isoformat()}", headers=_headers(ids["student"]))
        unmarked = client.get(
            f"/api/v1/student/menu?date={(target + timedelta(days=1)).isoformat()}",
            headers=_headers(ids["student"]),
        )
        missing = client.get("/api/v1/student/menu", headers=_headers(ids["student"]))
        invalid = client.get("/api/v1/student/menu?date=15-03-2025", headers=_headers(ids["student"]))

    assert response.status_code == 200
    assert [item["name"] for item in response.json()] == ["Fried rice"]
    assert response.json()[0]["variants"][0]["name"] == "Regular"
    assert unmarked.json() == []
    assert missing.status_code == 400
    assert invalid.status_code == 400


def test_pending_student_cannot_use_student_routes(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    ids = _seed(session_local)

    with TestClient(app) as client:
        response = client.get("/api/v1/student/cart", headers=_headers(ids["pending"]))
        anonymous = client.get("/api/v1/student/cart")

    assert response.status_code == 403
    assert response.json()["detail"] == "Account is not approved"
    assert anonymous.status_code == 401


def test_cart_add_update_and_remove(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    target = _local_today() + timedelta(days=2)
    ids = _seed(session_local, available_on=target)
    headers = _headers(ids["student"])
    line = {"menu_item_id": ids["rice"], "variant_id": ids["rice_variant"], "scheduled_for_date": target.isoformat()}

    with TestClient(app) as client:
        first = client.post("/api/v1/student/cart", json={**line, "quantity": 1}, headers=headers)
        second = client.post("/api/v1/student/cart", json={**line, "quantity": 2}, headers=headers)
        assert first.status_code == 200
        assert second.json()["quantity"] == 3

        updated = client.patch("/api/v1/student/cart", json={**line, "quantity": 5}, headers=headers)
        assert updated.json()["quantity"] == 5

        cart = client.get("/api/v1/student/cart", headers=headers)
        assert len(cart.json()["items"]) == 1
        assert cart.json()["items"][0]["menu_item_name"] == "Fried rice"

        removed = client.patch("/api/v1/student/cart", json={**line, "quantity": 0}, headers=headers)
        assert removed.json() == {"deleted": True}

        client.post("/api/v1/student/cart", json={**line, "quantity": 1}, headers=headers)
        deleted = client.delete("/api/v1/student/cart", params=line, headers=headers)
        missing = client.delete("/api/v1/student/cart", params=line, headers=headers)

    assert deleted.status_code == 200
    assert missing.status_code == 404
    with session_local() as db:
        assert db.scalars(select(CartItem)).all() == []


def test_cart_rejects_foreign_or_mismatched_variant(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    target = _local_today() + timedelta(days=2)
    ids = _seed(session_local)
    headers = _headers(ids["student"])

    with TestClient(app) as client:
        foreign = client.post(
            "/api/v1/student/cart",
            json={"menu_item_id": ids["foreign"], "variant_id": ids["foreign_variant"], "scheduled_for_date": target.isoformat()},
            headers=headers,
        )
        mismatched = client.post(
            "/api/v1/student/cart",
            json={"menu_item_id": ids["rice"], "variant_id": ids["noodles_variant"], "scheduled_for_date": target.isoformat()},
            headers=headers,
        )
        too_many = client.post(
            "/api/v1/student/cart",
            json={
                "menu_item_id": ids["rice"],
                "variant_id": ids["rice_variant"],
                "scheduled_for_date": target.isoformat(),
                "quantity": 51,
            },
            headers=headers,
        )

    assert foreign.status_code == 400
    assert foreign.json()["detail"] == "Invalid variant"
    assert mismatched.status_code == 400
    assert too_many.status_code == 422


def test_checkout_creates_order_visible_in_history(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    target = _local_today() + timedelta(days=2)
    ids = _seed(session_local, available_on=target)
    headers = _headers(ids["student"])
    line = {"menu_item_id": ids["rice"], "variant_id": ids["rice_variant"], "scheduled_for_date": target.isoformat()}

    with TestClient(app) as client:
        client.post("/api/v1/student/cart", json={**line, "quantity": 2}, headers=headers)
        checkout = client.post("/api/v1/student/checkout", json={"scheduled_for_date": target.isoformat()}, headers=headers)
        assert checkout.status_code == 201
        body = checkout.json()
        assert Decimal(body["total_amount"]) == Decimal("60.00")
        assert body["status"] == "PENDING"
        assert body["scheduled_for_date"] == target.isoformat()
        assert body["items"][0]["quantity"] == 2

        history = client.get("/api/v1/student/orders", headers=headers)
        detail = client.get(f"/api/v1/student/orders/{body['order_number']}", headers=headers)
        cart = client.get("/api/v1/student/cart", headers=headers)

    assert [order["order_number"] for order in history.json()] == [body["order_number"]]
    assert detail.status_code == 200
    assert cart.json()["items"] == []


def test_checkout_rejections_are_client_errors(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    today = _local_today()
    target = today + timedelta(days=2)
    ids = _seed(session_local, available_on=target)
    headers = _headers(ids["student"])

    with TestClient(app) as client:
        empty = client.post("/api/v1/student/checkout", json={"scheduled_for_date": target.isoformat()}, headers=headers)
        same_day = client.post("/api/v1/student/checkout", json={"scheduled_for_date": today.isoformat()}, headers=headers)
        too_far = client.post(
            "/api/v1/student/checkout",
            json={"scheduled_for_date": (today + timedelta(days=8)).isoformat()},
            headers=headers,
        )
        client.post(
            "/api/v1/student/cart",
            json={"menu_item_id": ids["noodles"], "variant_id": ids["noodles_variant"], "scheduled_for_date": target.isoformat()},
            headers=headers,
        )
        unavailable = client.post("/api/v1/student/checkout", json={"scheduled_for_date": target.isoformat()}, headers=headers)
        malformed = client.post("/api/v1/student/checkout", json={"scheduled_for_date": "tomorrow"}, headers=headers)

    assert empty.status_code == 400
    assert empty.json()["detail"] == "Cart is empty"
    assert same_day.json()["detail"] == "Cutoff time has passed for the selected date"
    assert too_far.json()["detail"] == "Selected date is beyond allowed window"
    assert unavailable.status_code == 400
    assert unavailable.json()["detail"] == "Some items are not available for the selected date"
    assert malformed.status_code == 422
    with session_local() as db:
        assert db.scalars(select(Order)).all() == []


def test_student_cannot_read_another_students_order(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    target = _local_today() + timedelta(days=2)
    ids = _seed(session_local, available_on=target)

    with session_local() as db:
        other = User(
            name="Minh",
            email="minh@example.com",
            password_hash=get_password_hash("secret123"),
            role="STUDENT",
            status="APPROVED",
            university_id=db.get(User, ids["student"]).university_id,
        )
        db.add(other)
        db.commit()
        other_id = other.id

    with TestClient(app) as client:
        client.post(
            "/api/v1/student/cart",
            json={"menu_item_id": ids["rice"], "variant_id": ids["rice_variant"], "scheduled_for_date": target.isoformat(), "quantity": 1},
            headers=_headers(ids["student"]),
        )
        order = client.post(
            "/api/v1/student/checkout",
            json={"scheduled_for_date": target.isoformat()},
            headers=_headers(ids["student"]),
        ).json()
        response = client.get(f"/api/v1/student/orders/{order['order_number']}", headers=_headers(other_id))

    assert response.status_code == 404


def test_student_settings_show_university_time_config(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    ids = _seed(session_local)

    with TestClient(app) as client:
        response = client.get("/api/v1/student/settings", headers=_headers(ids["student"]))

    assert response.status_code == 200
    assert response.json() == {
        "order_cutoff_time": "20:00",
        "max_advance_days": 7,
        "timezone": "Asia/Ho_Chi_Minh",
        "university_id": response.json()["university_id"],
        "university_name": "Saigon Tech",
    }
