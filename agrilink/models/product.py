"""Product ORM — seller listings with images.

Invariants:
    - available_quantity is the seller-declared stock; the sellable figure is
      computed by subtracting pending/accepted offers (core/stock.py)
    - At most one image per product has is_primary=True
    - Inactive products are hidden from every public listing

Design Decisions:
    - delivery_options/payment_terms stored as JSON name lists (None when empty)
    - Money as Numeric(12, 2) returned as float
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean, DateTime, Float, ForeignKey, Integer, JSON, Numeric, String, Text, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agrilink.db.base import Base, utcnow


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    seller_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("categories.id"), nullable=False,
    )
    location_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("locations.id"), nullable=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(
        Numeric(12, 2, asdecimal=False), nullable=False,
    )
    quantity: Mapped[float | None] = mapped_column(Float, nullable=True)
    quantity_unit: Mapped[str | None] = mapped_column(String(30), nullable=True)
    packaging: Mapped[str | None] = mapped_column(String(50), nullable=True)
    available_quantity: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    minimum_order: Mapped[str | None] = mapped_column(String(100), nullable=True)
    additional_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivery_options: Mapped[list | None] = mapped_column(JSON, nullable=True)
    payment_terms: Mapped[list | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )

    category: Mapped["Category"] = relationship("Category", lazy="selectin")
    location: Mapped["Location | None"] = relationship("Location", lazy="selectin")
    seller: Mapped["User"] = relationship("User", lazy="selectin")
    images: Mapped[list["ProductImage"]] = relationship(
        "ProductImage", back_populates="product",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="ProductImage.sort_order",
    )


class ProductImage(Base):
    __tablename__ = "product_images"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    product: Mapped["Product"] = relationship("Product", back_populates="images")
