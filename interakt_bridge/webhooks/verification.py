"""Webhook signature verification with constant-time HMAC-SHA256.

Security contract:
- Digest is computed over the raw request bytes, never a re-serialized body
- Comparison uses hmac.compare_digest() (constant-time, no timing attacks)
- Missing secret -> verification always fails (fail-closed)
- Verification failure is a normal outcome: returns False, never raises
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)

# Razorpay sends a hex HMAC-SHA256 of the body in this header
SIGNATURE_HEADER = "x-razorpay-signature"


def compute_signature(body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of ``body`` keyed by ``secret``."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """Verify a Razorpay webhook signature.

    Args:
        body: Raw request body bytes, exactly as received
        signature: Value of the X-Razorpay-Signature header
        secret: Shared webhook secret

    Returns:
        True if signature is valid
    """
    if not secret:
        logger.warning("WEBHOOK_SECRET not set, rejecting webhook")
        return False
    if not signature:
        return False

    computed = compute_signature(body, secret)
    # Header may carry non-ASCII text; compare bytes so compare_digest never raises
    return hmac.compare_digest(computed.encode("ascii"), signature.encode("utf-8"))


def verify_razorpay(body: bytes, headers: Mapping[str, str], secret: str) -> bool:
    """Verify using the signature header from a lowercase headers mapping."""
    return verify_signature(body, headers.get(SIGNATURE_HEADER), secret)
