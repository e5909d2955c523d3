from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from seal_bridge.core.exceptions import ConfigurationError, TransportFault, UpstreamError
from seal_bridge.integrations.seal import SealClient
from seal_bridge.schemas.webhook import CustomerUpdatedEvent
from seal_bridge.services.subscriptions import pick_active_subscription_id

logger = logging.getLogger(__name__)


class BridgeOutcome(str, Enum):
    IGNORED_INVALID_PAYLOAD = "ignored_invalid_payload"
    NO_ACTIVE_SUBSCRIPTION = "no_active_subscription"
    DISCOUNT_APPLIED = "discount_applied"


async def find_active_subscription_id(client: SealClient, email: str) -> Any | None:
    """Look up the customer's ACTIVE Seal subscription; every lookup failure means none."""
    try:
        response = await client.list_subscriptions(email)
    except ConfigurationError as exc:
        logger.error("Configuration error while looking up Seal subscriptions: %s", exc)
        return None
    except TransportFault as exc:
        logger.error("Error fetching Seal subscriptions for %s: %s", email, exc)
        return None

    if not response.ok:
        logger.error(
            "Seal subscription lookup for %s failed with status %s",
            email,
            response.status,
            extra={"status": response.status},
        )
        return None

    subscription_id = pick_active_subscription_id(response.body)
    logger.info("Seal subscription for %s => %s", email, subscription_id)
    return subscription_id


async def handle_customer_updated(client: SealClient, event: CustomerUpdatedEvent) -> BridgeOutcome:
    """Apply a Superfiliate reward code to the customer's active Seal subscription.

    Missing fields and customers without an ACTIVE subscription are expected
    outcomes and return normally. A failed discount call raises ``UpstreamError``;
    transport faults from that call propagate as ``TransportFault``.

    Not idempotent: a redelivered event applies the code again.
    """
    if not event.is_actionable:
        logger.warning(
            "Missing email or reward code in webhook payload",
            extra={"has_email": bool(event.email), "has_reward_code": bool(event.reward_code)},
        )
        return BridgeOutcome.IGNORED_INVALID_PAYLOAD

    logger.info("customer_updated for %s, reward code %s", event.email, event.reward_code)

    subscription_id = await find_active_subscription_id(client, event.email)
    if not subscription_id:
        logger.warning("No active Seal subscription found for %s. Not applying code.", event.email)
        return BridgeOutcome.NO_ACTIVE_SUBSCRIPTION

    response = await client.apply_discount_code(subscription_id, event.reward_code)
    if not response.ok:
        raise UpstreamError(
            f"Seal rejected discount code {event.reward_code} for subscription {subscription_id}",
            status=response.status,
            body=response.body,
        )

    logger.info(
        "Applied reward code %s to subscription %s for %s",
        event.reward_code,
        subscription_id,
        event.email,
    )
    return BridgeOutcome.DISCOUNT_APPLIED
