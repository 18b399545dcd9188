"""Interakt public API client: customer upsert, tagging, template messages.

Wraps three POST endpoints of the Interakt public API. Every call:
- sends JSON with an ``Authorization: Basic <api key>`` header
- returns the parsed response body on 2xx
- raises ExternalCallError on non-2xx (with the provider's body) or on a
  transport error (with the error message)

No retries and no ordering between calls; sequencing belongs to the caller.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from interakt_bridge.errors import ExternalCallError
from interakt_bridge.webhooks.models import PaymentRecord

logger = logging.getLogger(__name__)

_USERS_PATH = "/v1/public/track/users/"
_TAGS_PATH = "/v1/public/track/users/tags/"
_MESSAGE_PATH = "/v1/public/message/"


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class InteraktClient:
    """Thin async client for the Interakt public API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        workspace_id: str | None = None,
        base_url: str = "https://api.interakt.ai",
        country_code: str = "+91",
        language_code: str = "en",
    ) -> None:
        self._http = http
        self._api_key = api_key
        self._workspace_id = workspace_id
        self._base_url = base_url.rstrip("/")
        self._country_code = country_code
        self._language_code = language_code

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Basic {self._api_key}",
        }

    async def _post(self, operation: str, path: str, data: dict[str, Any]) -> Any:
        try:
            response = await self._http.post(
                f"{self._base_url}{path}", json=data, headers=self._headers
            )
        except httpx.HTTPError as e:
            logger.error("Interakt %s transport error: %s", operation, e)
            raise ExternalCallError(operation, None, str(e) or type(e).__name__) from e

        body = _response_body(response)
        if not response.is_success:
            logger.error(
                "Interakt %s failed: HTTP %d %s", operation, response.status_code, body
            )
            raise ExternalCallError(operation, response.status_code, body)

        logger.info("Interakt %s ok: %s", operation, body)
        return body

    async def upsert_customer(self, record: PaymentRecord) -> Any:
        """Create or identify the customer keyed by ``record.customer_id``."""
        return await self._post(
            "upsert_customer",
            _USERS_PATH,
            {
                "userId": record.customer_id,
                "phoneNumber": record.contact,
                "countryCode": self._country_code,
                "traits": {
                    "name": record.name,
                    "email": record.email,
                },
            },
        )

    async def tag_customer(self, customer_id: str, tag: str) -> Any:
        """Attach ``tag`` to an already-identified customer."""
        data: dict[str, Any] = {"userId": customer_id, "tag": tag}
        if self._workspace_id:
            data["workspaceId"] = self._workspace_id
        return await self._post("tag_customer", _TAGS_PATH, data)

    async def send_template_message(
        self,
        customer_id: str,
        template_name: str,
        body_values: list[str] | None = None,
    ) -> Any:
        """Send a pre-approved WhatsApp template addressed by userId.

        ``body_values`` bind positionally to the template's body placeholders.
        """
        return await self._post(
            "send_template_message",
            _MESSAGE_PATH,
            {
                "userId": customer_id,
                # Not needed when userId is provided
                "phoneNumber": "",
                "countryCode": "",
                "type": "Template",
                "template": {
                    "name": template_name,
                    "languageCode": self._language_code,
                    "headerValues": [],
                    "bodyValues": list(body_values or []),
                },
            },
        )
