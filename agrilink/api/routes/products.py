"""Product Routes — public listings, seller listing management, price comparison."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.api.dependencies import get_current_user
from agrilink.infrastructure.database import get_db
from agrilink.models.user import User
from agrilink.schemas.product import ProductCreate, ProductUpdate
from agrilink.services.product_service import ProductService

router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.get("")
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    seller_id: UUID | None = None,
    category: str | None = None,
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    items, total = await ProductService(db).list_products(
        page=page, limit=limit, seller_id=seller_id, category=category, search=search,
    )
    return {
        "products": [serializers.product_listing(p, available) for p, available in items],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": (total + limit - 1) // limit,
        },
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = ProductService(db)
    product = await service.create_product(user, body)
    return {
        "product": serializers.product_listing(product, await service.available_for(product)),
        "message": "Product created successfully",
    }


@router.get("/{product_id}")
async def get_product(product_id: UUID, db: AsyncSession = Depends(get_db)):
    service = ProductService(db)
    product = await service.get_product(product_id)
    return {
        "product": serializers.product_listing(product, await service.available_for(product)),
    }


@router.put("/{product_id}")
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = ProductService(db)
    product = await service.update_product(user, product_id, body)
    return {
        "product": serializers.product_listing(product, await service.available_for(product)),
        "message": "Product updated successfully",
    }


@router.delete("/{product_id}")
async def delete_product(
    product_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    outcome = await ProductService(db).delete_product(user, product_id)
    return {"message": f"Product {outcome} successfully", "result": outcome}


@router.get("/{product_id}/price-comparison")
async def price_comparison(product_id: UUID, db: AsyncSession = Depends(get_db)):
    return await ProductService(db).price_comparison(product_id)
