from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from seal_bridge.config import Settings
from seal_bridge.core.exceptions import ConfigurationError, TransportFault

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Seal-Token"

MISSING_TOKEN_MESSAGE = (
    "Missing SEAL_MERCHANT_TOKEN in environment variables. "
    "Set it in the .env file or in the process manager environment."
)


@dataclass(frozen=True)
class SealResponse:
    """Normalized result of one Seal call: ok flag, HTTP status and decoded body."""

    ok: bool
    status: int
    body: Any


class SealClient:
    """Seal Subscriptions merchant API client.

    Every call returns a ``SealResponse``; 4xx/5xx answers are data, not
    exceptions. Only transport failures raise (``TransportFault``), and a
    missing merchant token raises ``ConfigurationError`` when a call is made.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.base_url = settings.seal_api_base
        self.timeout = settings.seal_timeout_seconds
        self._transport = transport

    def endpoint_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _token(self) -> str:
        token = self.settings.seal_token_value()
        if not token:
            raise ConfigurationError(MISSING_TOKEN_MESSAGE)
        return token

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            TOKEN_HEADER: self._token(),
        }
        if extra:
            headers.update(extra)
        return headers

    async def request(
        self,
        path: str,
        method: str = "GET",
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> SealResponse:
        url = self.endpoint_url(path)
        request_headers = self._headers(headers)
        logger.info(
            "Seal request %s %s",
            method,
            url,
            extra={"method": method, "url": url, "params": params, "body": json},
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=request_headers,
                )
        except httpx.HTTPError as exc:
            logger.error(
                "Seal transport failure for %s %s: %s",
                method,
                url,
                exc,
                extra={"method": method, "url": url},
            )
            raise TransportFault(f"Seal request failed: {exc}", url=url) from exc

        result = SealResponse(
            ok=response.is_success,
            status=response.status_code,
            body=decode_body(response),
        )
        log = logger.info if result.ok else logger.warning
        log(
            "Seal response %s for %s %s",
            result.status,
            method,
            url,
            extra={"method": method, "url": url, "status": result.status, "ok": result.ok},
        )
        logger.debug("Seal response body", extra={"url": url, "response_body": result.body})
        return result

    async def list_subscriptions(
        self,
        email: str,
        *,
        with_items: bool = False,
        with_billing_attempts: bool = False,
    ) -> SealResponse:
        params: dict[str, Any] = {"query": email}
        if with_items:
            params["with-items"] = "true"
        if with_billing_attempts:
            params["with-billing-attempts"] = "true"
        return await self.request("/subscriptions", params=params)

    async def apply_discount_code(self, subscription_id: int, discount_code: str) -> SealResponse:
        payload = {
            "subscription_id": int(subscription_id),
            "action": "apply",
            "discount_code": discount_code,
        }
        return await self.request("/subscription-discount-code", "PUT", json=payload)

    async def update_subscription(self, subscription_id: int, action: str) -> SealResponse:
        """Transition a subscription: pause, resume, cancel or reactivate."""
        return await self.request("/subscription", "PUT", json={"id": subscription_id, "action": action})

    async def skip_billing_attempt(self, subscription_id: int, billing_attempt_id: int) -> SealResponse:
        payload = {
            "id": billing_attempt_id,
            "subscription_id": subscription_id,
            "action": "skip",
        }
        return await self.request("/subscription-billing-attempt", "PUT", json=payload)


def decode_body(response: httpx.Response) -> Any:
    """JSON bodies are parsed (``{}`` when unparsable); anything else becomes ``{"non_json": text}``."""
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}
    try:
        return {"non_json": response.text}
    except UnicodeDecodeError:
        return {"non_json": ""}
