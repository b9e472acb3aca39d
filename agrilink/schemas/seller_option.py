"""Seller Option Schemas — custom delivery options and payment terms."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class CustomOptionCreate(BaseModel):
    type: Literal["delivery", "payment"]
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v
