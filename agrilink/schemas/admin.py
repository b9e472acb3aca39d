"""Admin Schemas — moderation request bodies."""

from typing import Literal

from pydantic import BaseModel, Field


class ProductActiveUpdate(BaseModel):
    is_active: bool


class ComplaintUpdate(BaseModel):
    status: Literal["submitted", "under_review", "resolved", "dismissed"]
    admin_notes: str | None = Field(None, max_length=5000)
