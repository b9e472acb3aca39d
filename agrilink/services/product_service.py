"""Product Service — listings, stock computation and price comparison.

Invariants:
    - Public reads only see is_active products
    - Sellable stock = declared stock minus quantities of live pending and
      accepted offers (pending offers past expires_at no longer reserve)
    - Only the owner edits or deletes; buyers cannot list products
    - A product with offer history is deactivated instead of deleted

Design Decisions:
    - Reserved quantities fetched with one GROUP BY per page, not per product
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.domain_types import OfferStatus, ProductId, UserId, UserType
from agrilink.core.errors import (
    PermissionDeniedError, ResourceNotFoundError, ValidationError,
)
from agrilink.core.offer_workflow import RESERVING_STATUSES
from agrilink.core.price_comparison import (
    display_unit, names_match, price_range, to_per_kg,
)
from agrilink.core.stock import compute_available
from agrilink.core.trust import check_email_verified
from agrilink.infrastructure.file_storage import save_data_url
from agrilink.models.category import Category
from agrilink.models.offer import Offer
from agrilink.models.product import Product, ProductImage
from agrilink.models.user import User
from agrilink.schemas.product import ProductCreate, ProductUpdate
from agrilink.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


def _names_or_none(values: list[str] | None) -> list[str] | None:
    cleaned = [v.strip() for v in values or [] if v and v.strip()]
    return cleaned or None


def _live_reservation(now: datetime):
    """Offer rows whose quantity is still held against the listing."""
    pending, accepted = (s.value for s in RESERVING_STATUSES)
    return or_(
        Offer.status == accepted,
        and_(
            Offer.status == pending,
            or_(Offer.expires_at.is_(None), Offer.expires_at > now),
        ),
    )


class ProductService:

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Stock ───────────────────────────────────────────────────

    async def reserved_quantities(
        self, product_ids: list[uuid.UUID],
    ) -> dict[uuid.UUID, int]:
        if not product_ids:
            return {}
        result = await self.db.execute(
            select(Offer.product_id, func.coalesce(func.sum(Offer.quantity), 0))
            .where(
                Offer.product_id.in_(product_ids),
                _live_reservation(datetime.now(timezone.utc)),
            )
            .group_by(Offer.product_id),
        )
        return {pid: int(total) for pid, total in result.all()}

    async def available_for(self, product: Product) -> int:
        reserved = await self.reserved_quantities([product.id])
        return compute_available(product.available_quantity, reserved.get(product.id))

    async def with_availability(
        self, products: list[Product],
    ) -> list[tuple[Product, int]]:
        reserved = await self.reserved_quantities([p.id for p in products])
        return [
            (p, compute_available(p.available_quantity, reserved.get(p.id)))
            for p in products
        ]

    # ─── Reads ───────────────────────────────────────────────────

    async def list_products(
        self,
        page: int = 1,
        limit: int = 20,
        seller_id: UserId | None = None,
        category: str | None = None,
        search: str | None = None,
    ) -> tuple[list[tuple[Product, int]], int]:
        """(page of (product, available) newest first, total matching)."""
        filters = [Product.is_active.is_(True)]
        if seller_id:
            filters.append(Product.seller_id == seller_id)
        if category:
            filters.append(
                Product.category_id.in_(
                    select(Category.id).where(Category.name == category),
                ),
            )
        if search:
            pattern = f"%{search.strip()}%"
            filters.append(
                or_(Product.name.ilike(pattern), Product.description.ilike(pattern)),
            )

        total = await self.db.scalar(select(func.count(Product.id)).where(*filters))
        result = await self.db.execute(
            select(Product)
            .where(*filters)
            .order_by(Product.created_at.desc())
            .limit(limit)
            .offset((page - 1) * limit),
        )
        products = list(result.scalars().all())
        return await self.with_availability(products), total or 0

    async def get_product(
        self, product_id: ProductId, include_inactive: bool = False,
    ) -> Product:
        product = await self.db.get(Product, product_id)
        if not product or (not product.is_active and not include_inactive):
            raise ResourceNotFoundError("Product", str(product_id))
        return product

    # ─── Writes ──────────────────────────────────────────────────

    async def create_product(self, seller: User, body: ProductCreate) -> Product:
        check_email_verified(seller.email_verified, "create_product")
        if seller.user_type == UserType.BUYER.value:
            raise PermissionDeniedError("Buyers cannot create product listings")

        category = await self._require_category(body.category)
        product = Product(
            id=uuid.uuid4(),
            seller_id=seller.id,
            category_id=category.id,
            name=body.name,
            description=body.description,
            price=body.price,
            quantity=body.quantity,
            quantity_unit=body.quantity_unit,
            packaging=body.packaging,
            available_quantity=body.available_quantity,
            minimum_order=body.minimum_order,
            additional_notes=body.additional_notes,
            delivery_options=_names_or_none(body.delivery_options),
            payment_terms=_names_or_none(body.payment_terms),
        )
        if body.location:
            product.location_id = (
                await CatalogService(self.db).find_or_create_location(
                    body.location, body.region,
                )
            ).id
        self._replace_images(product, body.images)
        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        logger.info(
            f"Product '{product.name}' listed",
            extra={"user_id": seller.id, "product_id": product.id},
        )
        return product

    async def update_product(
        self, user: User, product_id: ProductId, body: ProductUpdate,
    ) -> Product:
        check_email_verified(user.email_verified, "edit_product")
        product = await self._owned(user, product_id, "edit")

        changes = body.model_dump(exclude_unset=True)
        images = changes.pop("images", None)
        category_name = changes.pop("category", None)
        city = changes.pop("location", None)
        region = changes.pop("region", None)

        if category_name:
            product.category_id = (await self._require_category(category_name)).id
        if city:
            product.location_id = (
                await CatalogService(self.db).find_or_create_location(city, region)
            ).id
        for key in ("delivery_options", "payment_terms"):
            if key in changes:
                changes[key] = _names_or_none(changes[key])
        for key, value in changes.items():
            setattr(product, key, value)
        if images is not None:
            self._replace_images(product, images)

        await self.db.commit()
        await self.db.refresh(product)
        logger.info("Product updated", extra={"product_id": product.id})
        return product

    async def delete_product(self, user: User, product_id: ProductId) -> str:
        """Delete the listing, or deactivate it when offers reference it."""
        check_email_verified(user.email_verified, "delete_product")
        product = await self._owned(user, product_id, "delete")

        has_offers = await self.db.scalar(
            select(func.count(Offer.id)).where(Offer.product_id == product.id),
        )
        if has_offers:
            product.is_active = False
            outcome = "deactivated"
        else:
            await self.db.delete(product)
            outcome = "deleted"
        await self.db.commit()
        logger.info(f"Product {outcome}", extra={"product_id": product_id})
        return outcome

    # ─── Price comparison ────────────────────────────────────────

    async def price_comparison(self, product_id: ProductId) -> dict:
        product = await self.get_product(product_id)
        result = await self.db.execute(
            select(Product).where(
                Product.is_active.is_(True),
                Product.id != product.id,
                Product.price > 0,
            ),
        )
        candidates = [
            p for p in result.scalars().all() if names_match(product.name, p.name)
        ]

        entries = []
        for p in candidates:
            per_kg = to_per_kg(p.price, p.quantity, p.quantity_unit)
            primary = next((img for img in p.images if img.is_primary), None)
            entries.append({
                "id": str(p.id),
                "name": p.name,
                "price": p.price,
                "price_per_kg": round(per_kg.price_per_kg, 2),
                "unit": display_unit(p.quantity, p.quantity_unit, p.packaging),
                "seller_id": str(p.seller_id),
                "seller_name": p.seller.name if p.seller else None,
                "image": primary.image_url if primary else None,
            })
        entries.sort(key=lambda e: e["price_per_kg"])

        current = to_per_kg(product.price, product.quantity, product.quantity_unit)
        return {
            "product": {
                "id": str(product.id),
                "name": product.name,
                "price": product.price,
                "price_per_kg": round(current.price_per_kg, 2),
                "unit": display_unit(
                    product.quantity, product.quantity_unit, product.packaging,
                ),
            },
            "comparisons": entries,
            "price_range": price_range([e["price_per_kg"] for e in entries]),
            "total": len(entries),
        }

    # ─── Helpers ─────────────────────────────────────────────────

    async def _require_category(self, name: str) -> Category:
        category = await CatalogService(self.db).get_category_by_name(name)
        if not category:
            raise ValidationError(f'Category "{name}" not found', field="category")
        return category

    async def _owned(self, user: User, product_id: ProductId, verb: str) -> Product:
        product = await self.get_product(product_id, include_inactive=True)
        if product.seller_id != user.id:
            raise PermissionDeniedError(f"You can only {verb} your own products")
        return product

    def _replace_images(self, product: Product, images: list[str]) -> None:
        product.images = [
            ProductImage(
                image_url=save_data_url(url, f"products/{product.id}"),
                is_primary=index == 0,
                sort_order=index,
            )
            for index, url in enumerate(u for u in images if u)
        ]
