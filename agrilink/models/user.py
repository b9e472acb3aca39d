"""User ORM — account aggregate: credentials, role, and one-to-one satellites.

Invariants:
    - email is unique and stored lower-cased
    - user_type ∈ {farmer, trader, buyer, admin}; account_type ∈ {individual, business}
    - Satellite rows (profile, verification, rating, business details) are
      at most one per user and are eager-loaded with the user

Design Decisions:
    - Email-verification, password-reset and email-change tokens live on the
      user row: one outstanding token of each kind per account
    - lazy="selectin" on one-to-ones: async sessions cannot lazy-load on attribute access
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agrilink.db.base import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_type: Mapped[str] = mapped_column(String(20), nullable=False)
    account_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="individual",
    )
    is_restricted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    email_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    email_verification_token: Mapped[str | None] = mapped_column(
        String(128), nullable=True, index=True,
    )
    email_verification_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    password_reset_token: Mapped[str | None] = mapped_column(
        String(128), nullable=True, index=True,
    )
    password_reset_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    pending_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email_change_token: Mapped[str | None] = mapped_column(
        String(128), nullable=True, index=True,
    )
    email_change_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )

    profile: Mapped["UserProfile | None"] = relationship(
        "UserProfile", back_populates="user", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )
    verification: Mapped["UserVerification | None"] = relationship(
        "UserVerification", back_populates="user", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )
    rating: Mapped["UserRating | None"] = relationship(
        "UserRating", back_populates="user", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )
    business_details: Mapped["BusinessDetails | None"] = relationship(
        "BusinessDetails", back_populates="user", uselist=False,
        cascade="all, delete-orphan", lazy="selectin",
    )


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    location_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("locations.id"), nullable=True,
    )
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    profile_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    about: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )

    user: Mapped["User"] = relationship("User", back_populates="profile")
    location: Mapped["Location | None"] = relationship("Location", lazy="selectin")
