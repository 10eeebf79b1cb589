from decimal import Decimal

import pytest

from hostel_food.core.config import settings
from hostel_food.services import email_service
from hostel_food.services.email_service import (
    EmailDeliveryError,
    EmailNotConfiguredError,
    NewOrderEmail,
    OrderEmailLine,
    send_new_order_email,
    send_password_reset_email,
)


class FakeResponse:
    def __init__(self, status_code: int = 201, text: str = "") -> None:
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def test_send_requires_api_key(monkeypatch) -> None:
    monkeypatch.setattr(settings, "brevo_api_key", "")

    with pytest.raises(EmailNotConfiguredError):
        send_password_reset_email("linh@example.com", "http://localhost/reset-password?token=abc")


def test_new_order_email_posts_to_brevo(monkeypatch) -> None:
    calls: list[dict] = []

    def _post(url, **kwargs):
        calls.append({"url": url, **kwargs})
        return FakeResponse()

    monkeypatch.setattr(settings, "brevo_api_key", "key-123")
    monkeypatch.setattr(email_service.requests, "post", _post)

    send_new_order_email(
        ["mai@example.com", "tuan@example.com"],
        NewOrderEmail(
            order_number="ORD-20250314-ABCDEF",
            total_amount=Decimal("30"),
            scheduled_for_date="2025-03-15",
            university_name="Saigon Tech",
            student_name="Linh <script>",
            items=[OrderEmailLine(quantity=1, name="Fried rice", variant="Regular", price=Decimal("30"))],
        ),
    )

    assert len(calls) == 1
    call = calls[0]
    assert call["url"] == email_service.BREVO_SEND_URL
    assert call["headers"]["api-key"] == "key-123"
    assert call["timeout"] == email_service.REQUEST_TIMEOUT_SECONDS
    assert call["json"]["to"] == [{"email": "mai@example.com"}, {"email": "tuan@example.com"}]
    assert call["json"]["subject"] == "New order ORD-20250314-ABCDEF"
    assert "Total: 30.00" in call["json"]["htmlContent"]
    assert "&lt;script&gt;" in call["json"]["htmlContent"]


def test_rejected_send_raises_delivery_error(monkeypatch) -> None:
    monkeypatch.setattr(settings, "brevo_api_key", "key-123")
    monkeypatch.setattr(email_service.requests, "post", lambda url, **kwargs: FakeResponse(400, "bad sender"))

    with pytest.raises(EmailDeliveryError):
        send_password_reset_email("linh@example.com", "http://localhost/reset-password?token=abc")
