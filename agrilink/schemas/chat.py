"""Chat Schemas — conversation start and message bodies."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ConversationStart(BaseModel):
    product_id: UUID


class MessageCreate(BaseModel):
    conversation_id: UUID
    content: str = Field(min_length=1, max_length=5000)
    message_type: Literal["text", "offer", "image"] = "text"

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content cannot be empty or whitespace")
        return v
