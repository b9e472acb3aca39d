"""Product Schemas — listing create/update bodies.

Invariants:
    - price must be positive; available_quantity non-negative
    - Text fields are stripped; name/category cannot be blank
    - Updates may omit a required column but never set it to null
    - images are data URLs or already-stored paths; the first becomes primary
"""

from pydantic import BaseModel, Field, field_validator


def _strip_required(v: str | None) -> str:
    if v is None:
        raise ValueError("field cannot be null")
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty or whitespace")
    return v


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=100)
    price: float = Field(gt=0)
    description: str | None = Field(None, max_length=5000)
    quantity: float | None = Field(None, gt=0)
    quantity_unit: str | None = Field(None, max_length=30)
    packaging: str | None = Field(None, max_length=50)
    available_quantity: int = Field(0, ge=0)
    minimum_order: str | None = Field(None, max_length=100)
    location: str | None = Field(None, max_length=100)
    region: str | None = Field(None, max_length=100)
    additional_notes: str | None = Field(None, max_length=5000)
    delivery_options: list[str] = Field(default_factory=list)
    payment_terms: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list, max_length=10)

    @field_validator("name", "category")
    @classmethod
    def strip_required(cls, v: str) -> str:
        return _strip_required(v)


class ProductUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""
    name: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = Field(None, min_length=1, max_length=100)
    price: float | None = Field(None, gt=0)
    description: str | None = Field(None, max_length=5000)
    quantity: float | None = Field(None, gt=0)
    quantity_unit: str | None = Field(None, max_length=30)
    packaging: str | None = Field(None, max_length=50)
    available_quantity: int | None = Field(None, ge=0)
    minimum_order: str | None = Field(None, max_length=100)
    location: str | None = Field(None, max_length=100)
    region: str | None = Field(None, max_length=100)
    additional_notes: str | None = Field(None, max_length=5000)
    delivery_options: list[str] | None = None
    payment_terms: list[str] | None = None
    images: list[str] | None = Field(None, max_length=10)
    is_active: bool | None = None

    @field_validator("price", "available_quantity", "is_active")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("name", "category")
    @classmethod
    def strip_required(cls, v: str | None) -> str:
        return _strip_required(v)
