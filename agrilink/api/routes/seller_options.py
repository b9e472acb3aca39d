"""Seller Option Routes — the caller's custom delivery options and payment terms."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.api.dependencies import get_current_user
from agrilink.infrastructure.database import get_db
from agrilink.models.user import User
from agrilink.schemas.seller_option import CustomOptionCreate
from agrilink.services.seller_option_service import SellerOptionService

router = APIRouter(prefix="/api/v1/seller/custom-options", tags=["seller"])


@router.get("")
async def list_options(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    grouped = await SellerOptionService(db).list_options(user)
    return {
        "delivery_options": [serializers.custom_option(o) for o in grouped["delivery"]],
        "payment_terms": [serializers.custom_option(o) for o in grouped["payment"]],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_option(
    body: CustomOptionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    option = await SellerOptionService(db).add_option(user, body)
    return {"option": serializers.custom_option(option)}


@router.delete("/{option_id}")
async def remove_option(
    option_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await SellerOptionService(db).remove_option(user, option_id)
    return {"message": "Option removed"}
