"""Shared fixtures for the webhook bridge test suite."""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any

import pytest

from interakt_bridge.errors import ExternalCallError

WEBHOOK_SECRET = "razorpay-test-secret"


def sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
    """Compute a valid X-Razorpay-Signature for ``body``."""
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def make_payload(
    event: str = "payment.authorized",
    *,
    payment_id: str = "pay_29QQoUBi66xm2f",
    order_id: str | None = "order_9A33XWu170gUtm",
    amount: int = 150000,
    email: str | None = "gaurav.kumar@example.com",
    contact: str | None = "9123456789",
    notes: Any = None,
) -> dict[str, Any]:
    """Razorpay-shaped webhook body."""
    entity: dict[str, Any] = {
        "id": payment_id,
        "entity": "payment",
        "amount": amount,
        "currency": "INR",
        "status": "authorized",
        "order_id": order_id,
        "method": "upi",
        "email": email,
        "contact": contact,
        "notes": notes if notes is not None else [],
    }
    return {
        "entity": "event",
        "account_id": "acc_BFQ7uQEaa7j2z7",
        "event": event,
        "contains": ["payment"],
        "payload": {"payment": {"entity": entity}},
        "created_at": 1700000000,
    }


def encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8")


class FakeOrderLookup:
    """Records order fetches; optionally raises."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.fetched: list[str] = []

    async def fetch_order(self, order_id: str) -> dict[str, Any]:
        self.fetched.append(order_id)
        if self.error is not None:
            raise self.error
        return {"id": order_id, "entity": "order", "status": "attempted"}


class FakeMessaging:
    """Records Interakt calls in order; ``fail_on`` names the failing operation."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _record(self, operation: str, *args: Any) -> dict[str, Any]:
        self.calls.append((operation, args))
        if operation == self.fail_on:
            raise ExternalCallError(operation, 400, {"message": "rejected"})
        return {"result": True}

    async def upsert_customer(self, record):
        return self._record("upsert_customer", record)

    async def tag_customer(self, customer_id, tag):
        return self._record("tag_customer", customer_id, tag)

    async def send_template_message(self, customer_id, template_name, body_values=None):
        return self._record("send_template_message", customer_id, template_name, body_values)

    @property
    def operations(self) -> list[str]:
        return [op for op, _ in self.calls]


@pytest.fixture
def order_lookup() -> FakeOrderLookup:
    return FakeOrderLookup()


@pytest.fixture
def messaging() -> FakeMessaging:
    return FakeMessaging()
