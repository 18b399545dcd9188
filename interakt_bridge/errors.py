"""Error taxonomy for the webhook pipeline.

Signature failures are not exceptions: the verifier returns False and the
orchestrator answers 400. Everything below is raised after verification
and is converted to the uniform 500 response at the handler boundary.
"""

from __future__ import annotations

from typing import Any


class BridgeError(Exception):
    """Base exception for failures while processing a verified webhook."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ExtractionError(BridgeError):
    """Webhook payload is missing a field the pipeline needs."""


class UpstreamFetchError(BridgeError):
    """Order lookup against the payment gateway failed."""

    def __init__(
        self,
        order_id: str,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        self.order_id = order_id
        self.status_code = status_code
        self.body = body
        if status_code is None:
            detail = f"Order fetch failed for {order_id}: {body}"
        else:
            detail = f"Order fetch failed for {order_id} (HTTP {status_code}): {body}"
        super().__init__(detail)


class ExternalCallError(BridgeError):
    """A call to the messaging provider failed (non-2xx or transport error)."""

    def __init__(
        self,
        operation: str,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        self.operation = operation
        self.status_code = status_code
        self.body = body
        if status_code is None:
            detail = f"Interakt {operation} failed: {body}"
        else:
            detail = f"Interakt {operation} failed (HTTP {status_code}): {body}"
        super().__init__(detail)
