"""Initial schema: users, catalog, products, offers, chat and moderation.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _ts(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name, sa.DateTime(timezone=True), nullable=nullable,
        server_default=None if nullable else sa.func.now(),
    )


def _fk(name: str, target: str, ondelete: str | None = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(
        name, UUID(as_uuid=True),
        sa.ForeignKey(target, ondelete=ondelete), nullable=nullable,
    )


def upgrade() -> None:
    op.create_table(
        "locations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("region", sa.String(100), nullable=True),
    )
    op.create_table(
        "categories",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
    )

    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("user_type", sa.String(20), nullable=False),
        sa.Column("account_type", sa.String(20), nullable=False, server_default="individual"),
        sa.Column("is_restricted", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("email_verified", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("email_verification_token", sa.String(128), nullable=True),
        _ts("email_verification_expires", nullable=True),
        sa.Column("password_reset_token", sa.String(128), nullable=True),
        _ts("password_reset_expires", nullable=True),
        _ts("created_at"),
        _ts("updated_at"),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_email_verification_token", "users", ["email_verification_token"])
    op.create_index("ix_users_password_reset_token", "users", ["password_reset_token"])

    op.create_table(
        "user_profiles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        _fk("location_id", "locations.id", ondelete=None, nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("profile_image", sa.String(500), nullable=True),
        sa.Column("about", sa.String(2000), nullable=True),
        sa.Column("website", sa.String(500), nullable=True),
        _ts("updated_at"),
    )
    op.create_table(
        "user_verification",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("verified", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("phone_verified", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("verification_status", sa.String(20), nullable=False, server_default="not_started"),
        sa.Column("verification_submitted", sa.Boolean, nullable=False, server_default="false"),
        _ts("updated_at"),
    )
    op.create_table(
        "user_ratings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("rating", sa.Float, nullable=False, server_default="0"),
        sa.Column("total_reviews", sa.Integer, nullable=False, server_default="0"),
        _ts("updated_at"),
    )
    op.create_table(
        "business_details",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("business_name", sa.String(255), nullable=True),
        sa.Column("business_description", sa.Text, nullable=True),
        sa.Column("business_license_number", sa.String(100), nullable=True),
        sa.Column("business_hours", sa.String(255), nullable=True),
        sa.Column("specialties", sa.Text, nullable=True),
        sa.Column("policies", sa.Text, nullable=True),
        _ts("updated_at"),
    )

    op.create_table(
        "products",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("seller_id", "users.id"),
        _fk("category_id", "categories.id", ondelete=None),
        _fk("location_id", "locations.id", ondelete=None, nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("quantity", sa.Float, nullable=True),
        sa.Column("quantity_unit", sa.String(30), nullable=True),
        sa.Column("packaging", sa.String(50), nullable=True),
        sa.Column("available_quantity", sa.Integer, nullable=False, server_default="0"),
        sa.Column("minimum_order", sa.String(100), nullable=True),
        sa.Column("additional_notes", sa.Text, nullable=True),
        sa.Column("delivery_options", sa.JSON, nullable=True),
        sa.Column("payment_terms", sa.JSON, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        _ts("created_at"),
        _ts("updated_at"),
    )
    op.create_index("ix_products_seller_id", "products", ["seller_id"])
    op.create_table(
        "product_images",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("product_id", "products.id"),
        sa.Column("image_url", sa.String(500), nullable=False),
        sa.Column("is_primary", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_product_images_product_id", "product_images", ["product_id"])

    op.create_table(
        "conversations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("buyer_id", "users.id"),
        _fk("seller_id", "users.id"),
        _fk("product_id", "products.id", ondelete="SET NULL", nullable=True),
        sa.Column("last_message", sa.Text, nullable=True),
        _ts("last_message_time", nullable=True),
        sa.Column("unread_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        _ts("created_at"),
        _ts("updated_at"),
    )
    op.create_index("ix_conversations_buyer_id", "conversations", ["buyer_id"])
    op.create_index("ix_conversations_seller_id", "conversations", ["seller_id"])
    op.create_table(
        "messages",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("conversation_id", "conversations.id"),
        _fk("sender_id", "users.id"),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("message_type", sa.String(20), nullable=False, server_default="text"),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default="false"),
        _ts("created_at"),
    )
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])

    op.create_table(
        "offers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("product_id", "products.id"),
        _fk("buyer_id", "users.id"),
        _fk("seller_id", "users.id"),
        _fk("conversation_id", "conversations.id", ondelete="SET NULL", nullable=True),
        sa.Column("offer_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("delivery_address", sa.JSON, nullable=True),
        sa.Column("delivery_options", sa.JSON, nullable=True),
        sa.Column("payment_terms", sa.JSON, nullable=True),
        _ts("expires_at", nullable=True),
        _fk("cancelled_by", "users.id", ondelete="SET NULL", nullable=True),
        sa.Column("cancellation_reason", sa.Text, nullable=True),
        _ts("created_at"),
        _ts("updated_at"),
    )
    for column in ("product_id", "buyer_id", "seller_id", "status"):
        op.create_index(f"ix_offers_{column}", "offers", [column])

    op.create_table(
        "offer_timeline",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("offer_id", "offers.id"),
        sa.Column("event_type", sa.String(30), nullable=False),
        sa.Column("event_description", sa.String(255), nullable=False),
        sa.Column("event_data", sa.JSON, nullable=True),
        _fk("user_id", "users.id", ondelete="SET NULL", nullable=True),
        _ts("created_at"),
    )
    op.create_index("ix_offer_timeline_offer_id", "offer_timeline", ["offer_id"])
    op.create_table(
        "offer_reviews",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("offer_id", "offers.id"),
        _fk("reviewer_id", "users.id"),
        _fk("reviewee_id", "users.id"),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        _ts("created_at"),
        sa.UniqueConstraint("offer_id", "reviewer_id", name="uq_offer_review_reviewer"),
    )
    op.create_index("ix_offer_reviews_offer_id", "offer_reviews", ["offer_id"])
    op.create_index("ix_offer_reviews_reviewee_id", "offer_reviews", ["reviewee_id"])
    op.create_table(
        "offer_complaints",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("offer_id", "offers.id"),
        _fk("complainant_id", "users.id"),
        _fk("reported_user_id", "users.id"),
        sa.Column("complaint_type", sa.String(30), nullable=False),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="submitted"),
        sa.Column("admin_notes", sa.Text, nullable=True),
        _ts("resolved_at", nullable=True),
        _ts("created_at"),
        _ts("updated_at"),
        sa.UniqueConstraint("offer_id", "complainant_id", name="uq_offer_complaint_user"),
    )
    op.create_index("ix_offer_complaints_offer_id", "offer_complaints", ["offer_id"])

    op.create_table(
        "notifications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("user_id", "users.id"),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("link", sa.String(500), nullable=True),
        _fk("offer_id", "offers.id", nullable=True),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default="false"),
        _ts("created_at"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    op.create_table(
        "verification_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("user_id", "users.id"),
        sa.Column("request_type", sa.String(30), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("documents", sa.JSON, nullable=True),
        sa.Column("rejected_documents", sa.JSON, nullable=True),
        sa.Column("business_info", sa.JSON, nullable=True),
        _fk("reviewed_by", "users.id", ondelete="SET NULL", nullable=True),
        _ts("reviewed_at", nullable=True),
        sa.Column("review_notes", sa.Text, nullable=True),
        _ts("submitted_at"),
    )
    op.create_index("ix_verification_requests_user_id", "verification_requests", ["user_id"])
    op.create_index("ix_verification_requests_status", "verification_requests", ["status"])

    op.create_table(
        "addresses",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("user_id", "users.id"),
        sa.Column("address_type", sa.String(20), nullable=False, server_default="home"),
        sa.Column("label", sa.String(100), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address_line1", sa.String(255), nullable=False),
        sa.Column("address_line2", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("postal_code", sa.String(20), nullable=True),
        sa.Column("country", sa.String(100), nullable=False, server_default="Myanmar"),
        sa.Column("instructions", sa.Text, nullable=True),
        sa.Column("is_default", sa.Boolean, nullable=False, server_default="false"),
        _ts("created_at"),
        _ts("updated_at"),
    )
    op.create_index("ix_addresses_user_id", "addresses", ["user_id"])

    op.create_table(
        "saved_products",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("user_id", "users.id"),
        _fk("product_id", "products.id"),
        _ts("created_at"),
        sa.UniqueConstraint("user_id", "product_id", name="uq_saved_product"),
    )
    op.create_index("ix_saved_products_user_id", "saved_products", ["user_id"])

    op.create_table(
        "user_reports",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _fk("reporter_id", "users.id"),
        _fk("reported_user_id", "users.id"),
        sa.Column("reason", sa.String(100), nullable=False),
        sa.Column("details", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        _ts("created_at"),
    )
    op.create_index("ix_user_reports_reported_user_id", "user_reports", ["reported_user_id"])


def downgrade() -> None:
    for table in (
        "user_reports", "saved_products", "addresses", "verification_requests",
        "notifications", "offer_complaints", "offer_reviews", "offer_timeline",
        "offers", "messages", "conversations", "product_images", "products",
        "business_details", "user_ratings", "user_verification", "user_profiles",
        "users", "categories", "locations",
    ):
        op.drop_table(table)
