"""User Schemas — profile, addresses, saved products, storefront and reports."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

AddressKind = Literal["home", "work", "farm", "warehouse", "other"]


class ProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    location: str | None = Field(None, max_length=100)
    region: str | None = Field(None, max_length=100)
    about: str | None = Field(None, max_length=2000)
    website: str | None = Field(None, max_length=500)
    profile_image: str | None = None


class AddressCreate(BaseModel):
    address_type: AddressKind = "home"
    label: str = Field(min_length=1, max_length=100)
    full_name: str = Field(min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address_line1: str = Field(min_length=1, max_length=255)
    address_line2: str | None = Field(None, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str = Field("Myanmar", max_length=100)
    instructions: str | None = Field(None, max_length=1000)
    is_default: bool = False


class AddressUpdate(BaseModel):
    address_type: AddressKind | None = None
    label: str | None = Field(None, min_length=1, max_length=100)
    full_name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address_line1: str | None = Field(None, min_length=1, max_length=255)
    address_line2: str | None = Field(None, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    instructions: str | None = Field(None, max_length=1000)
    is_default: bool | None = None


class SaveProductRequest(BaseModel):
    product_id: UUID


class StorefrontUpdate(BaseModel):
    business_name: str | None = Field(None, max_length=255)
    business_description: str | None = Field(None, max_length=5000)
    business_hours: str | None = Field(None, max_length=255)
    specialties: str | None = Field(None, max_length=2000)
    policies: str | None = Field(None, max_length=5000)
    about: str | None = Field(None, max_length=2000)
    website: str | None = Field(None, max_length=500)


class UserReportCreate(BaseModel):
    reason: str = Field(min_length=1, max_length=100)
    details: str | None = Field(None, max_length=5000)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reason cannot be empty or whitespace")
        return v


class SocialLinksUpdate(BaseModel):
    facebook: str | None = Field(None, max_length=255)
    instagram: str | None = Field(None, max_length=255)
    whatsapp: str | None = Field(None, max_length=50)
    tiktok: str | None = Field(None, max_length=255)
    telegram: str | None = Field(None, max_length=255)
    website: str | None = Field(None, max_length=255)

    @field_validator("*")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None
