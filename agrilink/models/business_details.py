"""Business Details ORM — business identity plus the public storefront fields."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agrilink.db.base import Base, utcnow


class BusinessDetails(Base):
    __tablename__ = "business_details"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    business_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    business_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    business_license_number: Mapped[str | None] = mapped_column(
        String(100), nullable=True,
    )
    business_hours: Mapped[str | None] = mapped_column(String(255), nullable=True)
    specialties: Mapped[str | None] = mapped_column(Text, nullable=True)
    policies: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )

    user: Mapped["User"] = relationship("User", back_populates="business_details")
