from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class CustomerUpdatedEvent(BaseModel):
    """Superfiliate ``customer_updated`` payload. Only two fields matter here."""

    model_config = ConfigDict(extra="allow")

    email: str | None = None
    reward_code: str | None = None

    @field_validator("email", "reward_code", mode="before")
    @classmethod
    def non_string_is_missing(cls, value: Any) -> str | None:
        if not isinstance(value, str):
            return None
        return value.strip() or None

    @property
    def is_actionable(self) -> bool:
        return bool(self.email and self.reward_code)

    @classmethod
    def from_payload(cls, payload: Any) -> "CustomerUpdatedEvent":
        """Build an event from any decoded body; non-objects yield an empty event."""
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)
