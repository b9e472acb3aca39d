"""Seller Option Service — a seller's own delivery options and payment terms.

Invariants:
    - Only farmers and traders keep custom options; buyers get 403
    - Names are unique per (seller, type) among active options
    - Removal deactivates the row; adding the same name again reactivates it
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.domain_types import UserType
from agrilink.core.errors import (
    ConflictError, PermissionDeniedError, ResourceNotFoundError,
)
from agrilink.models.seller_custom_option import SellerCustomOption
from agrilink.models.user import User
from agrilink.schemas.seller_option import CustomOptionCreate

logger = logging.getLogger(__name__)


def _require_seller(user: User) -> None:
    if user.user_type == UserType.BUYER.value:
        raise PermissionDeniedError("Only sellers can manage custom options")


class SellerOptionService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_options(self, seller: User) -> dict[str, list[SellerCustomOption]]:
        _require_seller(seller)
        result = await self.db.execute(
            select(SellerCustomOption)
            .where(
                SellerCustomOption.seller_id == seller.id,
                SellerCustomOption.is_active.is_(True),
            )
            .order_by(SellerCustomOption.name.asc()),
        )
        grouped: dict[str, list[SellerCustomOption]] = {"delivery": [], "payment": []}
        for option in result.scalars().all():
            grouped[option.kind].append(option)
        return grouped

    async def add_option(self, seller: User, body: CustomOptionCreate) -> SellerCustomOption:
        _require_seller(seller)
        existing = await self.db.scalar(
            select(SellerCustomOption).where(
                SellerCustomOption.seller_id == seller.id,
                SellerCustomOption.kind == body.type,
                SellerCustomOption.name == body.name,
            ),
        )
        if existing and existing.is_active:
            raise ConflictError(f"A {body.type} option named '{body.name}' already exists")

        if existing:
            existing.is_active = True
            existing.description = body.description
            option = existing
        else:
            option = SellerCustomOption(
                seller_id=seller.id,
                kind=body.type,
                name=body.name,
                description=body.description,
            )
            self.db.add(option)
        await self.db.commit()
        await self.db.refresh(option)
        logger.info(f"Custom {body.type} option added", extra={"user_id": seller.id})
        return option

    async def remove_option(self, seller: User, option_id: uuid.UUID) -> None:
        _require_seller(seller)
        option = await self.db.get(SellerCustomOption, option_id)
        if not option or option.seller_id != seller.id or not option.is_active:
            raise ResourceNotFoundError("CustomOption", str(option_id))
        option.is_active = False
        await self.db.commit()
        logger.info(f"Custom {option.kind} option removed", extra={"user_id": seller.id})
