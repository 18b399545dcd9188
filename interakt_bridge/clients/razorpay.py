"""Razorpay Orders API client (read-only order lookup)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from interakt_bridge.errors import UpstreamFetchError

logger = logging.getLogger(__name__)


class RazorpayClient:
    """Fetches orders with key id / key secret basic auth."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com",
    ) -> None:
        self._http = http
        self._auth = httpx.BasicAuth(key_id, key_secret)
        self._base_url = base_url.rstrip("/")

    async def fetch_order(self, order_id: str) -> dict[str, Any]:
        """GET /v1/orders/{order_id}.

        Raises:
            UpstreamFetchError: non-2xx response or transport error
        """
        url = f"{self._base_url}/v1/orders/{order_id}"
        try:
            response = await self._http.get(url, auth=self._auth)
        except httpx.HTTPError as e:
            logger.error("Razorpay order fetch %s transport error: %s", order_id, e)
            raise UpstreamFetchError(order_id, None, str(e) or type(e).__name__) from e

        if not response.is_success:
            try:
                body: Any = response.json()
            except ValueError:
                body = response.text
            logger.error(
                "Razorpay order fetch %s failed: HTTP %d %s",
                order_id,
                response.status_code,
                body,
            )
            raise UpstreamFetchError(order_id, response.status_code, body)

        return response.json()
