"""Review Routes — rate the other party of a completed offer."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.api.dependencies import get_current_user
from agrilink.infrastructure.database import get_db
from agrilink.models.user import User
from agrilink.schemas.review import ReviewCreate
from agrilink.services.review_service import ReviewService

router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.get("")
async def list_reviews(
    offer_id: UUID | None = None,
    user_id: UUID | None = None,
    db: AsyncSession = Depends(get_db),
):
    reviews = await ReviewService(db).list_reviews(offer_id=offer_id, user_id=user_id)
    return {"reviews": [serializers.review(r) for r in reviews]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    review = await ReviewService(db).create_review(user, body)
    return {"review": serializers.review(review), "message": "Review submitted successfully"}
