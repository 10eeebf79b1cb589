"""Manager order queue, status changes and student approvals."""

from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from hostel_food import main as main_module
from hostel_food.core.config import settings
from hostel_food.core.security import create_access_token, get_password_hash
from hostel_food.db import session as db_session
from hostel_food.db.base import Base
from hostel_food.main import app
from hostel_food.models import AuditLog, Menu, MenuItem, MenuItemVariant, Order, OrderItem, University, UniversityManager, User


def _prepare_db(tmp_path: Path, monkeypatch):
    engine = create_engine(f"sqlite:///{tmp_path / 'orders.db'}", connect_args={"check_same_thread": False})
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(main_module, "engine", engine)
    monkeypatch.setattr(main_module, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "app_env", "test")
    return testing_session_local


def _headers(user_id: int, role: str = "MANAGER") -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user_id), 'role': role})}"}


def _seed(session_local) -> dict[str, int]:
    with session_local() as db:
        own = University(name="Saigon Tech", code="STU")
        other = University(name="Hanoi Poly", code="HNP")
        db.add_all([own, other])
        db.flush()

        manager = User(name="Mai", email="mai@example.com", password_hash=get_password_hash("secret123"), role="MANAGER", status="APPROVED")
        outsider = User(name="Tuan", email="tuan@example.com", password_hash="x", role="MANAGER", status="APPROVED")
        student = User(name="Linh", email="linh@example.com", password_hash="x", role="STUDENT", status="APPROVED", university_id=own.id)
        pending = User(name="Nam", email="nam@example.com", password_hash="x", role="STUDENT", status="PENDING", university_id=own.id)
        foreign = User(name="Hoa", email="hoa@example.com", password_hash="x", role="STUDENT", status="PENDING", university_id=other.id)
        db.add_all([manager, outsider, student, pending, foreign])
        db.flush()
        db.add_all(
            [
                UniversityManager(university_id=own.id, manager_id=manager.id),
                UniversityManager(university_id=other.id, manager_id=outsider.id),
            ]
        )

        menu = Menu(university_id=own.id, name="Daily")
        db.add(menu)
        db.flush()
        item = MenuItem(menu_id=menu.id, name="Fried rice", slug="fried-rice")
        db.add(item)
        db.flush()
        variant = MenuItemVariant(menu_item_id=item.id, name="Regular", price=Decimal("30.00"), is_default=True)
        db.add(variant)
        db.flush()

        order = Order(
            order_number="ORD-20250314-AAAAAA",
            user_id=student.id,
            university_id=own.id,
            scheduled_for_date=date(2025, 3, 15),
            total_amount=Decimal("30.00"),
            status="PENDING",
            created_at=datetime(2025, 3, 14, 3, 0, tzinfo=timezone.utc),
        )
        order.items.append(OrderItem(menu_item_id=item.id, variant_id=variant.id, quantity=1, price=Decimal("30.00")))
        db.add(order)
        db.commit()
        return {
            "manager": manager.id,
            "outsider": outsider.id,
            "student": student.id,
            "pending": pending.id,
            "foreign": foreign.id,
            "order": order.id,
        }


def test_manager_lists_pending_orders_by_default(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    ids = _seed(session_local)

    with TestClient(app) as client:
        pending = client.get("/api/v1/manager/orders", headers=_headers(ids["manager"]))
        delivered = client.get("/api/v1/manager/orders?status=delivered", headers=_headers(ids["manager"]))
        invalid = client.get("/api/v1/manager/orders?status=LOST", headers=_headers(ids["manager"]))
        outsider = client.get("/api/v1/manager/orders", headers=_headers(ids["outsider"]))

    assert [order["order_number"] for order in pending.json()] == ["ORD-20250314-AAAAAA"]
    assert pending.json()[0]["items"][0]["variant_name"] == "Regular"
    assert delivered.json() == []
    assert invalid.status_code == 400
    assert outsider.json() == []


def test_status_change_is_audited(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    ids = _seed(session_local)
    headers = _headers(ids["manager"])

    with TestClient(app) as client:
        approved = client.patch("/api/v1/manager/orders", json={"order_id": ids["order"], "status": "APPROVED"}, headers=headers)
        ready = client.patch(
            "/api/v1/manager/orders/by-number/ORD-20250314-AAAAAA",
            json={"status": "READY_TO_COLLECT"},
            headers=headers,
        )
        back = client.patch("/api/v1/manager/orders", json={"order_id": ids["order"], "status": "PENDING"}, headers=headers)
        unknown_status = client.patch("/api/v1/manager/orders", json={"order_id": ids["order"], "status": "LOST"}, headers=headers)
        missing = client.patch("/api/v1/manager/orders", json={"order_id": 999, "status": "APPROVED"}, headers=headers)

    assert approved.json()["status"] == "APPROVED"
    assert approved.json()["status_updated_at"] is not None
    assert ready.json()["status"] == "READY_TO_COLLECT"
    assert back.json()["status"] == "PENDING"
    assert unknown_status.status_code == 422
    assert missing.status_code == 404

    with session_local() as db:
        entries = db.scalars(
            select(AuditLog).where(AuditLog.action_type == "order_status_change").order_by(AuditLog.id.asc())
        ).all()
        assert [entry.after_snapshot["status"] for entry in entries] == ["APPROVED", "READY_TO_COLLECT", "PENDING"]
        assert entries[0].before_snapshot["status"] == "PENDING"
        assert entries[0].actor_identifier == "mai@example.com"
        assert entries[0].entity_id == ids["order"]


def test_manager_cannot_change_other_university_order(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    ids = _seed(session_local)

    with TestClient(app) as client:
        patch = client.patch(
            "/api/v1/manager/orders",
            json={"order_id": ids["order"], "status": "CANCELLED"},
            headers=_headers(ids["outsider"]),
        )
        get = client.get("/api/v1/manager/orders/by-number/ORD-20250314-AAAAAA", headers=_headers(ids["outsider"]))

    assert patch.status_code == 403
    assert get.status_code == 403
    with session_local() as db:
        assert db.get(Order, ids["order"]).status == "PENDING"


def test_student_approval_workflow(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    ids = _seed(session_local)
    headers = _headers(ids["manager"])

    with TestClient(app) as client:
        queue = client.get("/api/v1/manager/students", headers=headers)
        approved = client.patch("/api/v1/manager/students", json={"student_id": ids["pending"], "action": "approve"}, headers=headers)
        suspended = client.patch("/api/v1/manager/students", json={"student_id": ids["pending"], "action": "suspend"}, headers=headers)
        reactivated = client.patch(
            "/api/v1/manager/students",
            json={"student_id": ids["pending"], "action": "reactivate"},
            headers=headers,
        )
        foreign = client.patch("/api/v1/manager/students", json={"student_id": ids["foreign"], "action": "approve"}, headers=headers)
        missing = client.patch("/api/v1/manager/students", json={"student_id": 999, "action": "approve"}, headers=headers)
        bad_action = client.patch("/api/v1/manager/students", json={"student_id": ids["pending"], "action": "ban"}, headers=headers)
        approved_list = client.get("/api/v1/manager/students?status=APPROVED", headers=headers)

    assert [student["email"] for student in queue.json()] == ["nam@example.com"]
    assert approved.json()["message"] == "Student approved successfully"
    assert approved.json()["student"]["status"] == "APPROVED"
    assert suspended.json()["student"]["status"] == "SUSPENDED"
    assert reactivated.json()["message"] == "Student reactivated successfully"
    assert foreign.status_code == 403
    assert missing.status_code == 404
    assert bad_action.status_code == 422
    assert {student["email"] for student in approved_list.json()} == {"linh@example.com", "nam@example.com"}

    with session_local() as db:
        actions = db.scalars(select(AuditLog.action_type).where(AuditLog.entity_type == "user").order_by(AuditLog.id.asc())).all()
        assert actions == ["student_approve", "student_suspend", "student_reactivate"]


def test_ordered_menu_item_cannot_be_deleted(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    ids = _seed(session_local)
    with session_local() as db:
        item_id = db.scalar(select(MenuItem.id).where(MenuItem.slug == "fried-rice"))

    with TestClient(app) as client:
        deleted = client.delete(f"/api/v1/manager/menu/items/{item_id}", headers=_headers(ids["manager"]))
        history = client.get("/api/v1/student/orders", headers=_headers(ids["student"], role="STUDENT"))

    assert deleted.status_code == 409
    assert deleted.json()["detail"]["details"] == {"order_lines": 1, "cart_lines": 0}
    assert history.status_code == 200
    assert history.json()[0]["items"][0]["variant_name"] == "Regular"
    with session_local() as db:
        assert db.get(MenuItem, item_id) is not None
