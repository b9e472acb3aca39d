"""Offer Schemas — offer creation, status change and complaint bodies.

Invariants:
    - offer_price positive; quantity range checked by core/stock.py so the
      error carries the marketplace message
    - status is free text here; core/offer_workflow.parse_status owns the whitelist
    - complaint reason cannot be blank
"""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class OfferCreate(BaseModel):
    product_id: UUID
    offer_price: float = Field(gt=0)
    quantity: int = 1
    message: str | None = Field(None, max_length=2000)
    delivery_address: dict | None = None
    delivery_options: list[str] | None = None
    payment_terms: list[str] | None = None
    expiration_hours: int | None = Field(None, ge=1, le=24 * 30)


class OfferStatusUpdate(BaseModel):
    status: str = Field(min_length=1, max_length=20)
    cancellation_reason: str | None = Field(None, max_length=2000)


class ComplaintCreate(BaseModel):
    complaint_type: Literal["unfair_cancellation", "delivery_issue"]
    reason: str = Field(min_length=1, max_length=5000)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reason cannot be empty or whitespace")
        return v
