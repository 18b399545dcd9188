"""Webhook payload schema and the normalized payment record."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

PAYMENT_AUTHORIZED = "payment.authorized"

_CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


class PaymentEntity(BaseModel):
    """Razorpay payment entity (only the fields the bridge reads)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str | None = None
    order_id: str | None = None
    amount: int | None = None
    currency: str = "INR"
    email: str | None = None
    contact: str | None = None
    notes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("notes", mode="before")
    @classmethod
    def _empty_notes(cls, value: Any) -> Any:
        # Razorpay serializes empty notes as [] rather than {}
        if value is None or value == []:
            return {}
        return value


class PaymentWrapper(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    entity: PaymentEntity | None = None


class EventPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    payment: PaymentWrapper | None = None


class WebhookEnvelope(BaseModel):
    """Parsed Razorpay webhook body."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    event: str = ""
    account_id: str | None = None
    payload: EventPayload | None = None

    @property
    def payment(self) -> PaymentEntity | None:
        if self.payload is None or self.payload.payment is None:
            return None
        return self.payload.payment.entity


@dataclass(frozen=True)
class PaymentRecord:
    """Normalized customer/payment fields for a payment.authorized event."""

    customer_id: str
    name: str
    email: str | None
    contact: str | None
    amount: Decimal
    currency: str
    payment_id: str

    @property
    def display_amount(self) -> str:
        """Amount prefixed by its currency, e.g. ``₹1500.00``.

        Currencies without an entry in the symbol table are prefixed with
        their ISO code and a space instead, e.g. ``AED 10.50``.
        """
        code = self.currency.upper()
        symbol = _CURRENCY_SYMBOLS.get(code, f"{code} ")
        return f"{symbol}{self.amount:.2f}"
