"""Verification Schemas — trust-badge request submission and admin decisions.

Invariants:
    - Document keys are limited to id_card, business_license, farm_certification
    - Document values are data URLs or previously stored verification uploads
"""

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DOCUMENT_KEYS = ("id_card", "business_license", "farm_certification")

_STORED_DOCUMENT = re.compile(r"^/uploads/verification/[\w-]+/[\w-]+\.[a-z]+$")


class VerificationSubmit(BaseModel):
    request_type: Literal["id_verification", "business_verification"] | None = None
    documents: dict[str, str] | None = None
    business_info: dict | None = None
    business_name: str | None = Field(None, max_length=255)
    business_description: str | None = Field(None, max_length=5000)
    business_license_number: str | None = Field(None, max_length=100)

    @field_validator("documents")
    @classmethod
    def known_documents(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        if v is None:
            return v
        unknown = set(v) - set(DOCUMENT_KEYS)
        if unknown:
            raise ValueError(f"Unknown document types: {', '.join(sorted(unknown))}")
        documents = {k: doc for k, doc in v.items() if doc}
        for key, doc in documents.items():
            if not (doc.startswith("data:") or _STORED_DOCUMENT.match(doc)):
                raise ValueError(f"{key} must be an uploaded file")
        return documents


class VerificationDecision(BaseModel):
    notes: str | None = Field(None, max_length=2000)
