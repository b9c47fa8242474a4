"""Pydantic models for the parts of a Stripe event we read.

Stripe sends far more than this; unknown fields are ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class StripeEventData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    object: dict[str, Any]


class StripeEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    type: str
    data: StripeEventData


class StripeCheckoutSession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    client_reference_id: str | None = None
    # A plain id unless the webhook endpoint asks Stripe to expand it.
    payment_intent: str | dict[str, Any] | None = None
    payment_status: str | None = None

    @property
    def payment_intent_id(self) -> str | None:
        if isinstance(self.payment_intent, dict):
            return self.payment_intent.get("id")
        return self.payment_intent
