"""Normalization of Seal subscription payloads.

Seal nests subscription lists under different keys depending on the endpoint
and the query flags, and billing attempt timestamps under several names. The
functions here accept those variants and produce ``SubscriptionView`` records.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from seal_bridge.schemas.subscription import (
    BillingAttemptView,
    NextBillingAttempt,
    SubscriptionItemView,
    SubscriptionView,
)

logger = logging.getLogger(__name__)

ACTIVE_STATUS = "ACTIVE"
PENDING_STATUS = "pending"
ATTEMPT_DATE_KEYS = ("date", "date_time", "datetime", "scheduled_at")
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def extract_subscription_list(body: Any) -> list[Any]:
    """Return the subscription list from the first matching response shape.

    Accepted, in order: ``payload.subscriptions``, ``subscriptions``, ``payload``.
    """
    if not isinstance(body, dict):
        return []
    payload = body.get("payload")
    if isinstance(payload, dict) and isinstance(payload.get("subscriptions"), list):
        return payload["subscriptions"]
    if isinstance(body.get("subscriptions"), list):
        return body["subscriptions"]
    if isinstance(payload, list):
        return payload
    return []


def pick_active_subscription_id(body: Any) -> Any | None:
    """Id of the first subscription whose status is exactly ``ACTIVE``."""
    subscriptions = extract_subscription_list(body)
    if not subscriptions:
        logger.info("No subscriptions found for customer")
        return None

    for subscription in subscriptions:
        if isinstance(subscription, dict) and subscription.get("status") == ACTIVE_STATUS:
            subscription_id = subscription.get("id")
            logger.info("Selected active subscription %s", subscription_id)
            return subscription_id

    logger.info("No active subscriptions found among %s results", len(subscriptions))
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string, epoch milliseconds or datetime into an aware UTC-based datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


def is_upcoming(attempt: BillingAttemptView, now: datetime) -> bool:
    """Blank or pending status, or a timestamp strictly after ``now``."""
    status = str(attempt.status or "").strip().lower()
    if not status or status == PENDING_STATUS:
        return True
    scheduled = parse_timestamp(attempt.date)
    return scheduled is not None and scheduled > now


def next_billing_attempt(attempts: Iterable[BillingAttemptView], now: datetime) -> NextBillingAttempt | None:
    upcoming = [attempt for attempt in attempts if is_upcoming(attempt, now)]
    if not upcoming:
        return None
    # Stable sort; attempts without a usable timestamp come first.
    upcoming.sort(key=lambda attempt: parse_timestamp(attempt.date) or EARLIEST)
    first = upcoming[0]
    return NextBillingAttempt(id=first.id, date=first.date, status=first.status or PENDING_STATUS)


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def project_billing_attempt(raw: dict[str, Any]) -> BillingAttemptView:
    date = next((raw.get(key) for key in ATTEMPT_DATE_KEYS if raw.get(key)), None)
    return BillingAttemptView(
        id=raw.get("id"),
        date=date,
        status=raw.get("status") or None,
        order_id=raw.get("order_id") or None,
        completed_at=raw.get("completed_at") or None,
    )


def project_subscription(raw: dict[str, Any], now: datetime) -> SubscriptionView:
    attempts = [project_billing_attempt(ba) for ba in _as_list(raw.get("billing_attempts")) if isinstance(ba, dict)]
    items = [
        SubscriptionItemView(title=item.get("title"), qty=item.get("quantity"), id=item.get("id"))
        for item in _as_list(raw.get("items"))
        if isinstance(item, dict)
    ]
    return SubscriptionView(
        id=raw.get("id"),
        subscription_id=raw.get("id"),
        status=raw.get("status"),
        items=items,
        discounts=_as_list(raw.get("discount_codes")),
        billing_attempts=attempts,
        next_billing_attempt=next_billing_attempt(attempts, now),
    )


def normalize_subscriptions(body: Any, now: datetime | None = None) -> list[dict[str, Any]]:
    """Project every subscription in a Seal list response to its public JSON shape."""
    evaluated_at = now or now_utc()
    return [
        project_subscription(raw, evaluated_at).model_dump()
        for raw in extract_subscription_list(body)
        if isinstance(raw, dict)
    ]
