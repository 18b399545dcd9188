"""Webhook HTTP handler: verification, routing, then the Interakt call chain.

Flow per delivery:
1. Read raw body (needed for HMAC verification)
2. Verify X-Razorpay-Signature -> 400 on failure, nothing else runs
3. Decode JSON and route on the event name alone; anything but
   payment.authorized -> 200 "no action taken", whatever the payload shape
4. Validate the envelope, extract PaymentRecord (fetches the order)
5. upsert_customer -> tag_customer -> send_template_message, in that order
6. 200 on success

Failure contract:
- Any exception after verification -> 500 {"error", "details"}
- The chain stops at the first failing call; earlier calls are not undone,
  so Interakt may hold a customer (and tag) without the message having gone out
- Nothing is retried here; Razorpay redelivers on non-2xx
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from interakt_bridge.webhooks.extractor import (
    OrderLookup,
    extract_payment_record,
    parse_envelope,
)
from interakt_bridge.webhooks.models import (
    PAYMENT_AUTHORIZED,
    PaymentRecord,
    WebhookEnvelope,
)
from interakt_bridge.webhooks.verification import verify_razorpay

logger = logging.getLogger(__name__)

DEFAULT_TAG = "paid_customer"
DEFAULT_TEMPLATE = "payment_success"

Verifier = Callable[[bytes, Mapping[str, str], str], bool]
Extractor = Callable[[WebhookEnvelope, OrderLookup], Awaitable[PaymentRecord]]


class MessagingClient(Protocol):
    """The three provider operations the chain drives."""

    async def upsert_customer(self, record: PaymentRecord) -> Any: ...

    async def tag_customer(self, customer_id: str, tag: str) -> Any: ...

    async def send_template_message(
        self, customer_id: str, template_name: str, body_values: list[str] | None = None
    ) -> Any: ...


@dataclass(frozen=True)
class WebhookResult:
    """Status code and JSON body for the webhook response."""

    status_code: int
    content: dict[str, Any] = field(default_factory=dict)

    def to_response(self) -> JSONResponse:
        return JSONResponse(self.content, status_code=self.status_code)


INVALID_SIGNATURE = WebhookResult(400, {"error": "Invalid webhook signature"})
NO_ACTION = WebhookResult(
    200, {"status": "success", "message": "Event received but no action taken"}
)
PROCESSED = WebhookResult(
    200, {"status": "success", "message": "Webhook processed successfully"}
)


def _server_error(exc: Exception) -> WebhookResult:
    details = getattr(exc, "message", None) or str(exc) or type(exc).__name__
    return WebhookResult(500, {"error": "Internal server error", "details": details})


def _log_webhook(event: str, payment_id: str, status: str) -> None:
    """Audit log for webhook activity."""
    logger.info(
        "WEBHOOK_AUDIT event=%s payment=%s status=%s", event, payment_id, status
    )


class WebhookOrchestrator:
    """Drives one webhook delivery from raw bytes to a WebhookResult.

    Collaborators are injected so tests can substitute fakes; the instance
    holds no per-request state and is shared across concurrent requests.
    """

    def __init__(
        self,
        webhook_secret: str,
        order_lookup: OrderLookup,
        messaging: MessagingClient,
        verifier: Verifier = verify_razorpay,
        extractor: Extractor = extract_payment_record,
        tag: str = DEFAULT_TAG,
        template_name: str = DEFAULT_TEMPLATE,
    ) -> None:
        self._secret = webhook_secret
        self._order_lookup = order_lookup
        self._messaging = messaging
        self._verify = verifier
        self._extract = extractor
        self._tag = tag
        self._template_name = template_name

    async def handle(self, body: bytes, headers: Mapping[str, str]) -> WebhookResult:
        """Process one delivery. Never raises.

        Args:
            body: Raw request body, exactly as received
            headers: Request headers with lowercase keys
        """
        start = time.time()

        if not self._verify(body, headers, self._secret):
            _log_webhook("unknown", "unknown", "signature_failed")
            return INVALID_SIGNATURE

        event = "unknown"
        payment_id = "unknown"
        try:
            # Parse a separate decode of the verified bytes
            data = json.loads(body)
            raw_event = data.get("event") if isinstance(data, dict) else None
            event = str(raw_event) if raw_event else "unknown"
            logger.info("Received webhook event: %s", event)

            # Route before any schema check so unhandled events are always acked
            if raw_event != PAYMENT_AUTHORIZED:
                _log_webhook(event, payment_id, "ignored")
                return NO_ACTION

            envelope = parse_envelope(data)
            record = await self._extract(envelope, self._order_lookup)
            payment_id = record.payment_id
            await self._run_chain(record)
        except Exception as e:
            logger.exception("Error processing webhook %s/%s", event, payment_id)
            _log_webhook(event, payment_id, "failed")
            return _server_error(e)

        elapsed_ms = (time.time() - start) * 1000
        logger.debug("Webhook processed in %.1fms: %s/%s", elapsed_ms, event, payment_id)
        _log_webhook(event, payment_id, "processed")
        return PROCESSED

    async def _run_chain(self, record: PaymentRecord) -> None:
        # Every call is addressed by the id the customer was upserted under
        customer_id = record.customer_id
        await self._messaging.upsert_customer(record)
        await self._messaging.tag_customer(customer_id, self._tag)
        await self._messaging.send_template_message(
            customer_id,
            self._template_name,
            [record.name, record.display_amount, record.payment_id],
        )


def register_webhook_routes(app: FastAPI, orchestrator: WebhookOrchestrator) -> None:
    """Register the Razorpay webhook endpoint on the FastAPI app."""

    @app.post("/webhook/razorpay")
    async def razorpay_webhook(request: Request):
        """Receive Razorpay webhooks (signature-verified)."""
        body = await request.body()
        headers = {k.lower(): v for k, v in request.headers.items()}
        result = await orchestrator.handle(body, headers)
        return result.to_response()

    logger.info("Webhook routes registered: /webhook/razorpay")
