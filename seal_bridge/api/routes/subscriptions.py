"""
Subscription proxy API Routes

Business failures (missing input the UI can render, Seal errors, internal
exceptions) answer 200 with an ``error`` envelope; callers inspect that field.
Only auth failures (401) and malformed path/body input (400) change the status.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request

from seal_bridge.api.dependencies import get_seal_client
from seal_bridge.core.exceptions import ConfigurationError, ValidationError
from seal_bridge.integrations.seal import SealClient, SealResponse
from seal_bridge.services.subscriptions import normalize_subscriptions

logger = logging.getLogger(__name__)

router = APIRouter()

SUBSCRIPTION_ACTIONS = ("pause", "resume", "cancel", "reactivate")


def parse_positive_int(value: Any) -> int | None:
    """Plain ASCII digits only; signs, underscores and other digit scripts are rejected."""
    text = str(value)
    if not (text.isascii() and text.isdigit()):
        return None
    parsed = int(text)
    return parsed if parsed > 0 else None


def upstream_error(response: SealResponse, **extra: Any) -> dict[str, Any]:
    return {"reason": "upstream_error", "status": response.status, "body": response.body, **extra}


def bridge_exception(exc: Exception) -> dict[str, Any]:
    return {"reason": "bridge_exception", "message": str(exc) or exc.__class__.__name__}


async def _read_action(request: Request) -> str:
    try:
        body = await request.json()
    except ValueError:
        return ""
    if not isinstance(body, dict) or body.get("action") is None:
        return ""
    return str(body["action"]).lower()


@router.get("/subscriptions")
async def list_subscriptions(
    email: str | None = Query(default=None),
    client: SealClient = Depends(get_seal_client),
) -> dict:
    """Subscriptions (with items and billing attempts) for a customer email."""
    try:
        raw_email = (email or "").strip()
        if not raw_email:
            return {"subscriptions": [], "error": {"reason": "missing_email"}}

        response = await client.list_subscriptions(raw_email, with_items=True, with_billing_attempts=True)
        if not response.ok:
            return {"subscriptions": [], "error": upstream_error(response)}

        return {"subscriptions": normalize_subscriptions(response.body)}
    except ConfigurationError as exc:
        logger.error("Configuration error while listing Seal subscriptions: %s", exc)
        return {"subscriptions": [], "error": bridge_exception(exc)}
    except Exception as exc:
        logger.exception("Subscription lookup failed")
        return {"subscriptions": [], "error": bridge_exception(exc)}


@router.put("/subscription/{subscription_id}/skip/{attempt_id}")
async def skip_billing_attempt(
    subscription_id: str,
    attempt_id: str,
    client: SealClient = Depends(get_seal_client),
) -> dict:
    """Skip a specific billing attempt for the subscription."""
    parsed_subscription_id = parse_positive_int(subscription_id)
    if parsed_subscription_id is None:
        raise ValidationError("Invalid subscription_id in URL")
    billing_attempt_id = parse_positive_int(attempt_id)
    if billing_attempt_id is None:
        raise ValidationError("Invalid billing_attempt_id in URL")

    try:
        response = await client.skip_billing_attempt(parsed_subscription_id, billing_attempt_id)
    except ConfigurationError as exc:
        logger.error("Configuration error while skipping billing attempt %s: %s", billing_attempt_id, exc)
        return {"error": bridge_exception(exc)}
    except Exception as exc:
        logger.exception("Skipping billing attempt %s failed", billing_attempt_id)
        return {"error": bridge_exception(exc)}

    if not response.ok:
        return {"error": upstream_error(response)}

    return {
        "ok": True,
        "subscription_id": parsed_subscription_id,
        "billing_attempt_id": billing_attempt_id,
        "result": response.body,
    }


@router.put("/subscription/{subscription_id}")
async def update_subscription_status(
    subscription_id: str,
    request: Request,
    client: SealClient = Depends(get_seal_client),
) -> Any:
    """Pause, resume, cancel or reactivate a subscription; Seal's body passes through."""
    parsed_id = parse_positive_int(subscription_id)
    action = await _read_action(request)
    if parsed_id is None or not action:
        raise ValidationError("Missing id or action")
    if action not in SUBSCRIPTION_ACTIONS:
        raise ValidationError("Invalid action. Must be: pause, resume, cancel, or reactivate")

    try:
        response = await client.update_subscription(parsed_id, action)
    except ConfigurationError as exc:
        logger.error("Configuration error while updating subscription %s: %s", parsed_id, exc)
        return {"error": bridge_exception(exc)}
    except Exception as exc:
        logger.exception("Subscription %s %s failed", parsed_id, action)
        return {"error": bridge_exception(exc)}

    if not response.ok:
        return {
            "error": upstream_error(
                response,
                attempted_endpoint=client.endpoint_url("/subscription"),
                request_payload={"id": parsed_id, "action": action},
            )
        }
    return response.body
