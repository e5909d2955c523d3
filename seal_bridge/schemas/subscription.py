from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SubscriptionItemView(BaseModel):
    title: Any = None
    qty: Any = None
    id: Any = None


class BillingAttemptView(BaseModel):
    id: Any = None
    date: Any = None
    status: Any = None
    order_id: Any = None
    completed_at: Any = None


class NextBillingAttempt(BaseModel):
    id: Any = None
    date: Any = None
    status: Any = "pending"


class SubscriptionView(BaseModel):
    """Public projection of a Seal subscription returned by the proxy API."""

    id: Any = None
    subscription_id: Any = None
    status: Any = None
    items: list[SubscriptionItemView] = Field(default_factory=list)
    discounts: list[Any] = Field(default_factory=list)
    billing_attempts: list[BillingAttemptView] = Field(default_factory=list)
    next_billing_attempt: NextBillingAttempt | None = None
