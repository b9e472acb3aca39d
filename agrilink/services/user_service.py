"""User Service — own profile, addresses, saved products, storefront and reports.

Invariants:
    - A user with any address has exactly one default address
    - Saved products are unique per (user, product)
    - Storefront lookups accept a user id or an email address
    - Users cannot report themselves
    - Social links are one row per user, created on first update
"""

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.errors import (
    BusinessRuleError, ConflictError, PermissionDeniedError, ResourceNotFoundError,
)
from agrilink.infrastructure.file_storage import save_data_url
from agrilink.models.address import Address
from agrilink.models.business_details import BusinessDetails
from agrilink.models.product import Product
from agrilink.models.saved_product import SavedProduct
from agrilink.models.user import User, UserProfile
from agrilink.models.user_report import UserReport
from agrilink.models.user_social import UserSocial
from agrilink.schemas.user import (
    AddressCreate, AddressUpdate, ProfileUpdate, SocialLinksUpdate, StorefrontUpdate,
    UserReportCreate,
)
from agrilink.services.catalog_service import CatalogService
from agrilink.services.product_service import ProductService

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = ("phone", "about", "website")
_STOREFRONT_FIELDS = (
    "business_name", "business_description", "business_hours", "specialties", "policies",
)


class UserService:

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Profile ─────────────────────────────────────────────────

    async def update_profile(self, user: User, body: ProfileUpdate) -> User:
        changes = body.model_dump(exclude_unset=True)
        profile = self._profile(user)
        if changes.get("name"):
            user.name = changes["name"].strip()
        for key in _PROFILE_FIELDS:
            if key in changes:
                setattr(profile, key, changes[key])
        if changes.get("profile_image"):
            profile.profile_image = save_data_url(
                changes["profile_image"], f"profiles/{user.id}",
            )
        if changes.get("location"):
            profile.location = await CatalogService(self.db).find_or_create_location(
                changes["location"], changes.get("region"),
            )
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("Profile updated", extra={"user_id": user.id})
        return user

    # ─── Addresses ───────────────────────────────────────────────

    async def list_addresses(self, user: User) -> list[Address]:
        result = await self.db.execute(
            select(Address)
            .where(Address.user_id == user.id)
            .order_by(Address.is_default.desc(), Address.created_at.desc()),
        )
        return list(result.scalars().all())

    async def create_address(self, user: User, body: AddressCreate) -> Address:
        count = await self.db.scalar(
            select(func.count(Address.id)).where(Address.user_id == user.id),
        )
        make_default = body.is_default or not count
        if make_default:
            await self._clear_default(user.id)
        address = Address(user_id=user.id, **body.model_dump(exclude={"is_default"}))
        address.is_default = make_default
        self.db.add(address)
        await self.db.commit()
        await self.db.refresh(address)
        return address

    async def update_address(
        self, user: User, address_id: uuid.UUID, body: AddressUpdate,
    ) -> Address:
        address = await self._own_address(user, address_id)
        changes = body.model_dump(exclude_unset=True)
        make_default = changes.pop("is_default", None)
        for key, value in changes.items():
            if value is not None:
                setattr(address, key, value)
        if make_default:
            await self._clear_default(user.id, keep=address.id)
            address.is_default = True
        await self.db.commit()
        await self.db.refresh(address)
        return address

    async def delete_address(self, user: User, address_id: uuid.UUID) -> None:
        address = await self._own_address(user, address_id)
        was_default = address.is_default
        await self.db.delete(address)
        await self.db.flush()
        if was_default:
            result = await self.db.execute(
                select(Address)
                .where(Address.user_id == user.id)
                .order_by(Address.created_at.desc())
                .limit(1),
            )
            successor = result.scalar_one_or_none()
            if successor:
                successor.is_default = True
        await self.db.commit()

    # ─── Saved products ──────────────────────────────────────────

    async def list_saved(self, user: User) -> list[SavedProduct]:
        result = await self.db.execute(
            select(SavedProduct)
            .where(SavedProduct.user_id == user.id)
            .order_by(SavedProduct.created_at.desc()),
        )
        return list(result.scalars().all())

    async def save_product(self, user: User, product_id: uuid.UUID) -> SavedProduct:
        await ProductService(self.db).get_product(product_id)
        existing = await self.db.scalar(
            select(SavedProduct.id).where(
                SavedProduct.user_id == user.id, SavedProduct.product_id == product_id,
            ),
        )
        if existing:
            raise ConflictError("Product already saved")
        saved = SavedProduct(user_id=user.id, product_id=product_id)
        self.db.add(saved)
        await self.db.commit()
        await self.db.refresh(saved)
        return saved

    async def remove_saved(self, user: User, product_id: uuid.UUID) -> None:
        saved = await self.db.scalar(
            select(SavedProduct).where(
                SavedProduct.user_id == user.id, SavedProduct.product_id == product_id,
            ),
        )
        if not saved:
            raise ResourceNotFoundError("SavedProduct", str(product_id))
        await self.db.delete(saved)
        await self.db.commit()

    # ─── Storefront ──────────────────────────────────────────────

    async def find_seller(self, key: str) -> User:
        """Resolve a storefront key (user id or email) to a user."""
        if "@" in key:
            user = await self.db.scalar(
                select(User).where(User.email == key.strip().lower()),
            )
        else:
            try:
                user = await self.db.get(User, uuid.UUID(key))
            except ValueError:
                user = None
        if not user:
            raise ResourceNotFoundError("User", key)
        return user

    async def storefront(self, key: str) -> tuple[User, list[tuple[Product, int]]]:
        seller = await self.find_seller(key)
        products, _ = await ProductService(self.db).list_products(
            page=1, limit=100, seller_id=seller.id,
        )
        return seller, products

    async def update_storefront(self, user: User, body: StorefrontUpdate) -> User:
        changes = body.model_dump(exclude_unset=True)
        business = {k: v for k, v in changes.items() if k in _STOREFRONT_FIELDS}
        if business:
            if user.business_details is None:
                user.business_details = BusinessDetails()
            for key, value in business.items():
                setattr(user.business_details, key, value)
        profile = self._profile(user)
        for key in ("about", "website"):
            if key in changes:
                setattr(profile, key, changes[key])
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("Storefront updated", extra={"user_id": user.id})
        return user

    # ─── Social links ────────────────────────────────────────────

    async def get_social(self, user_id: uuid.UUID) -> UserSocial | None:
        if not await self.db.get(User, user_id):
            raise ResourceNotFoundError("User", str(user_id))
        return await self.db.scalar(
            select(UserSocial).where(UserSocial.user_id == user_id),
        )

    async def update_social(self, user: User, body: SocialLinksUpdate) -> UserSocial:
        social = await self.db.scalar(
            select(UserSocial).where(UserSocial.user_id == user.id),
        )
        if social is None:
            social = UserSocial(user_id=user.id)
            self.db.add(social)
        for key, value in body.model_dump(exclude_unset=True).items():
            setattr(social, key, value)
        await self.db.commit()
        await self.db.refresh(social)
        logger.info("Social links updated", extra={"user_id": user.id})
        return social

    # ─── Reports ─────────────────────────────────────────────────

    async def report_user(
        self, reporter: User, reported_id: uuid.UUID, body: UserReportCreate,
    ) -> UserReport:
        if reporter.id == reported_id:
            raise BusinessRuleError("You cannot report yourself", "SELF_REPORT")
        if not await self.db.get(User, reported_id):
            raise ResourceNotFoundError("User", str(reported_id))
        report = UserReport(
            reporter_id=reporter.id, reported_user_id=reported_id,
            reason=body.reason, details=body.details,
        )
        self.db.add(report)
        await self.db.commit()
        await self.db.refresh(report)
        logger.info("User reported", extra={"user_id": reported_id})
        return report

    # ─── Helpers ─────────────────────────────────────────────────

    def _profile(self, user: User) -> UserProfile:
        if user.profile is None:
            user.profile = UserProfile()
        return user.profile

    async def _own_address(self, user: User, address_id: uuid.UUID) -> Address:
        address = await self.db.get(Address, address_id)
        if not address:
            raise ResourceNotFoundError("Address", str(address_id))
        if address.user_id != user.id:
            raise PermissionDeniedError("You can only manage your own addresses")
        return address

    async def _clear_default(self, user_id: uuid.UUID, keep: uuid.UUID | None = None) -> None:
        query = update(Address).where(
            Address.user_id == user_id, Address.is_default.is_(True),
        )
        if keep:
            query = query.where(Address.id != keep)
        await self.db.execute(query.values(is_default=False))
