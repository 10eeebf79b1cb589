"""Transactional email through the Brevo HTTP API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from html import escape

import requests

from hostel_food.core.config import settings

logger = logging.getLogger(__name__)

BREVO_SEND_URL = "https://api.brevo.com/v3/smtp/email"
REQUEST_TIMEOUT_SECONDS = 30


class EmailNotConfiguredError(RuntimeError):
    """Raised when no Brevo API key is configured."""


class EmailDeliveryError(RuntimeError):
    """Raised when Brevo rejects a send request."""


@dataclass(frozen=True)
class OrderEmailLine:
    quantity: int
    name: str
    variant: str
    price: Decimal


@dataclass(frozen=True)
class NewOrderEmail:
    order_number: str
    total_amount: Decimal
    scheduled_for_date: str
    university_name: str
    student_name: str
    items: list[OrderEmailLine]


def _send(to: list[str], subject: str, html_content: str) -> None:
    if not settings.brevo_api_key:
        raise EmailNotConfiguredError("BREVO_API_KEY is not set")

    response = requests.post(
        BREVO_SEND_URL,
        json={
            "sender": {"email": settings.brevo_from_email, "name": settings.brevo_from_name},
            "to": [{"email": address} for address in to],
            "subject": subject,
            "htmlContent": html_content,
        },
        headers={"api-key": settings.brevo_api_key, "Content-Type": "application/json"},
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    if not response.ok:
        raise EmailDeliveryError(f"Brevo send failed ({response.status_code}): {response.text}")


def send_password_reset_email(to: str, reset_link: str) -> None:
    html_content = (
        "<p>Hello,</p>"
        "<p>We received a request to reset your password. Click the link below to set a new password. "
        "This link will expire in 1 hour.</p>"
        f'<p><a href="{escape(reset_link)}">Reset your password</a></p>'
        "<p>If you did not request this, you can safely ignore this email.</p>"
    )
    _send([to], "Reset your password", html_content)


def send_new_order_email(to: list[str], payload: NewOrderEmail) -> None:
    rows = "".join(
        f"<tr><td>{line.quantity}</td><td>{escape(line.name)}</td>"
        f"<td>{escape(line.variant)}</td><td>{line.price:.2f}</td></tr>"
        for line in payload.items
    )
    html_content = (
        f"<p>New order <strong>{escape(payload.order_number)}</strong> "
        f"from {escape(payload.student_name)} at {escape(payload.university_name)}.</p>"
        f"<p>Scheduled for: {escape(payload.scheduled_for_date)}</p>"
        "<table><thead><tr><th>Qty</th><th>Item</th><th>Variant</th><th>Price</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
        f"<p>Total: {payload.total_amount:.2f}</p>"
    )
    _send(to, f"New order {payload.order_number}", html_content)
