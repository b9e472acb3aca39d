"""Review Schemas — post-completion ratings."""

from uuid import UUID

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    offer_id: UUID
    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)
