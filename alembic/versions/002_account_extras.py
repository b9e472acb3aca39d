"""Email change, maintenance schedules, seller custom options and social links.

Revision ID: 002_account_extras
Revises: 001_initial
Create Date: 2026-10-16

Adds the pending-email columns on users and three tables: maintenance
windows, per-seller delivery/payment options and per-user social links.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_account_extras"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
    ]


def _owner(name: str, unique: bool = False) -> sa.Column:
    return sa.Column(
        name, UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=unique,
    )


def upgrade() -> None:
    op.add_column("users", sa.Column("pending_email", sa.String(255), nullable=True))
    op.add_column("users", sa.Column("email_change_token", sa.String(128), nullable=True))
    op.add_column(
        "users",
        sa.Column("email_change_expires", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_email_change_token", "users", ["email_change_token"])

    op.create_table(
        "maintenance_schedules",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer, nullable=False),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )
    op.create_index(
        "ix_maintenance_schedules_start_time", "maintenance_schedules", ["start_time"],
    )

    op.create_table(
        "seller_custom_options",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _owner("seller_id"),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
        sa.UniqueConstraint("seller_id", "kind", "name", name="uq_seller_custom_option"),
    )
    op.create_index(
        "ix_seller_custom_options_seller_id", "seller_custom_options", ["seller_id"],
    )

    op.create_table(
        "user_social",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        _owner("user_id", unique=True),
        sa.Column("facebook", sa.String(255), nullable=True),
        sa.Column("instagram", sa.String(255), nullable=True),
        sa.Column("whatsapp", sa.String(50), nullable=True),
        sa.Column("tiktok", sa.String(255), nullable=True),
        sa.Column("telegram", sa.String(255), nullable=True),
        sa.Column("website", sa.String(255), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("user_social")
    op.drop_table("seller_custom_options")
    op.drop_table("maintenance_schedules")
    op.drop_index("ix_users_email_change_token", table_name="users")
    op.drop_column("users", "email_change_expires")
    op.drop_column("users", "email_change_token")
    op.drop_column("users", "pending_email")
