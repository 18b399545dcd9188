"""Payment event extraction: webhook envelope -> PaymentRecord.

Field priority (first non-empty wins):
- name:    notes.customer_name, else "Customer"
- email:   notes.email, else payment.email
- contact: notes.contact, else payment.contact

The payment id doubles as the Interakt userId for every downstream call.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Protocol

from pydantic import ValidationError

from interakt_bridge.errors import ExtractionError
from interakt_bridge.webhooks.models import PaymentRecord, WebhookEnvelope

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMER_NAME = "Customer"

_MINOR_UNITS_PER_MAJOR = Decimal(100)
_TWO_PLACES = Decimal("0.01")


class OrderLookup(Protocol):
    """Anything that can fetch a payment-gateway order by id."""

    async def fetch_order(self, order_id: str) -> dict[str, Any]: ...


def _first_present(*values: Any) -> str | None:
    for value in values:
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def parse_envelope(data: Any) -> WebhookEnvelope:
    """Validate a decoded webhook body against the envelope schema.

    Raises:
        ExtractionError: body does not match the expected shape
    """
    try:
        return WebhookEnvelope.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        raise ExtractionError(f"Malformed webhook payload: {problems}") from e


def to_major_units(amount: int) -> Decimal:
    """Convert minor units (paise/cents) to a two-place major-unit Decimal."""
    return (Decimal(amount) / _MINOR_UNITS_PER_MAJOR).quantize(_TWO_PLACES)


async def extract_payment_record(
    envelope: WebhookEnvelope, order_lookup: OrderLookup
) -> PaymentRecord:
    """Build the PaymentRecord for a verified payment.authorized envelope.

    Raises:
        ExtractionError: payment entity, id, or amount missing
        UpstreamFetchError: order lookup failed (propagated from order_lookup)
    """
    payment = envelope.payment
    if payment is None:
        raise ExtractionError("Webhook payload has no payload.payment.entity")
    if not payment.id:
        raise ExtractionError("Payment entity has no id")
    if payment.amount is None:
        raise ExtractionError(f"Payment {payment.id} has no amount")

    if payment.order_id:
        # The order is fetched but not used to build the record; the fields
        # below come from the payment entity alone.
        order = await order_lookup.fetch_order(payment.order_id)
        logger.debug(
            "Fetched order %s for payment %s (status=%s)",
            payment.order_id,
            payment.id,
            order.get("status"),
        )
    else:
        logger.info("Payment %s has no order_id, skipping order lookup", payment.id)

    notes = payment.notes
    return PaymentRecord(
        customer_id=payment.id,
        name=_first_present(notes.get("customer_name")) or DEFAULT_CUSTOMER_NAME,
        email=_first_present(notes.get("email"), payment.email),
        contact=_first_present(notes.get("contact"), payment.contact),
        amount=to_major_units(payment.amount),
        currency=payment.currency,
        payment_id=payment.id,
    )
