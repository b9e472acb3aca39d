"""User Routes — own profile, addresses, saved products, storefronts and reports.

Invariants:
    - /me/* routes act on the caller only
    - Storefront and social-link reads are public; the storefront key is a
      user id or an email
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.api.dependencies import get_current_user
from agrilink.infrastructure.database import get_db
from agrilink.models.user import User
from agrilink.schemas.user import (
    AddressCreate, AddressUpdate, ProfileUpdate, SaveProductRequest,
    SocialLinksUpdate, StorefrontUpdate, UserReportCreate,
)
from agrilink.services.product_service import ProductService
from agrilink.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.put("/me/profile")
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).update_profile(user, body)
    return {"user": serializers.current_user(user), "message": "Profile updated successfully"}


@router.put("/me/storefront")
async def update_storefront(
    body: StorefrontUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).update_storefront(user, body)
    return {
        "business_details": serializers.business_details(user),
        "message": "Storefront updated successfully",
    }


@router.put("/me/social")
async def update_social(
    body: SocialLinksUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    social = await UserService(db).update_social(user, body)
    return {"social": serializers.social_links(social), "message": "Social links updated"}


# ─── Addresses ───────────────────────────────────────────────────

@router.get("/me/addresses")
async def list_addresses(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    addresses = await UserService(db).list_addresses(user)
    return {"addresses": [serializers.address(a) for a in addresses]}


@router.post("/me/addresses", status_code=status.HTTP_201_CREATED)
async def create_address(
    body: AddressCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    address = await UserService(db).create_address(user, body)
    return {"address": serializers.address(address)}


@router.put("/me/addresses/{address_id}")
async def update_address(
    address_id: UUID,
    body: AddressUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    address = await UserService(db).update_address(user, address_id, body)
    return {"address": serializers.address(address)}


@router.delete("/me/addresses/{address_id}")
async def delete_address(
    address_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await UserService(db).delete_address(user, address_id)
    return {"message": "Address deleted successfully"}


# ─── Saved products ──────────────────────────────────────────────

@router.get("/me/saved-products")
async def list_saved_products(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    saved = await UserService(db).list_saved(user)
    listings = await ProductService(db).with_availability([s.product for s in saved])
    return {
        "saved_products": [
            {
                "saved_at": serializers.iso(s.created_at),
                "product": serializers.product_listing(product, available),
            }
            for s, (product, available) in zip(saved, listings)
        ],
    }


@router.post("/me/saved-products", status_code=status.HTTP_201_CREATED)
async def save_product(
    body: SaveProductRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    saved = await UserService(db).save_product(user, body.product_id)
    return {"id": str(saved.id), "product_id": str(saved.product_id), "message": "Product saved"}


@router.delete("/me/saved-products/{product_id}")
async def remove_saved_product(
    product_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await UserService(db).remove_saved(user, product_id)
    return {"message": "Product removed from saved list"}


# ─── Public storefront, social links & reports ───────────────────

@router.get("/{key}/storefront")
async def storefront(key: str, db: AsyncSession = Depends(get_db)):
    service = UserService(db)
    seller, products = await service.storefront(key)
    social = await service.get_social(seller.id)
    profile = seller.profile
    return {
        "seller": serializers.user_summary(seller),
        "about": profile.about if profile else None,
        "website": profile.website if profile else None,
        "business_details": serializers.business_details(seller),
        "social": serializers.social_links(social),
        "products": [serializers.product_listing(p, available) for p, available in products],
        "member_since": serializers.iso(seller.created_at),
    }


@router.post("/{user_id}/report", status_code=status.HTTP_201_CREATED)
async def report_user(
    user_id: UUID,
    body: UserReportCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    report = await UserService(db).report_user(user, user_id, body)
    return {"id": str(report.id), "message": "Report submitted"}


@router.get("/{user_id}/social")
async def social_links(user_id: UUID, db: AsyncSession = Depends(get_db)):
    social = await UserService(db).get_social(user_id)
    return {"social": serializers.social_links(social)}
