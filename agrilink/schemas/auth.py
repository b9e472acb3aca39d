"""Auth Schemas — registration, login and credential-flow request bodies.

Invariants:
    - Emails are stripped and lower-cased before any lookup
    - Admin accounts cannot be self-registered (user_type excludes admin)
    - New passwords are at least 8 characters
"""

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from agrilink.core.password_strength import MIN_LENGTH

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not _EMAIL.match(value):
        raise ValueError("Invalid email address")
    return value


class RegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=MIN_LENGTH, max_length=128)
    name: str = Field(min_length=1, max_length=255)
    user_type: Literal["farmer", "trader", "buyer"]
    account_type: Literal["individual", "business"]
    location: str = Field(min_length=1, max_length=100)
    region: str = Field(min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=50)
    business_name: str | None = Field(None, max_length=255)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("name", "location", "region")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty or whitespace")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=1)


class PasswordResetRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=MIN_LENGTH, max_length=128)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=MIN_LENGTH, max_length=128)


class PasswordStrengthRequest(BaseModel):
    password: str = Field(max_length=128)


class EmailChangeRequest(BaseModel):
    new_email: str
    current_password: str = Field(min_length=1)

    @field_validator("new_email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)
