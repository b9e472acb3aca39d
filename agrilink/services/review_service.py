"""Review Service — post-completion ratings and the reviewee's rating aggregate.

Invariants:
    - Only completed offers can be reviewed, only by their buyer or seller
    - One review per reviewer per offer
    - UserRating is recomputed from all received reviews on every new review
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.domain_types import OfferStatus
from agrilink.core.errors import (
    BusinessRuleError, PermissionDeniedError, ResourceNotFoundError, ValidationError,
)
from agrilink.core.trust import summarize_ratings
from agrilink.models.offer import Offer, OfferReview
from agrilink.models.user import User
from agrilink.models.user_verification import UserRating
from agrilink.schemas.review import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_review(self, user: User, body: ReviewCreate) -> OfferReview:
        offer = await self.db.get(Offer, body.offer_id)
        if not offer:
            raise ResourceNotFoundError("Offer", str(body.offer_id))
        if user.id not in (offer.buyer_id, offer.seller_id):
            raise PermissionDeniedError("You can only review offers you took part in")
        if offer.status != OfferStatus.COMPLETED.value:
            raise BusinessRuleError("Can only review completed offers", "OFFER_NOT_COMPLETED")

        existing = await self.db.scalar(
            select(OfferReview.id).where(
                OfferReview.offer_id == offer.id, OfferReview.reviewer_id == user.id,
            ),
        )
        if existing:
            raise BusinessRuleError("You have already reviewed this offer", "DUPLICATE_REVIEW")

        reviewee_id = offer.seller_id if user.id == offer.buyer_id else offer.buyer_id
        review = OfferReview(
            offer_id=offer.id, reviewer_id=user.id, reviewee_id=reviewee_id,
            rating=body.rating, comment=body.comment,
        )
        self.db.add(review)
        await self.db.flush()
        await self._refresh_rating(reviewee_id)
        await self.db.commit()
        await self.db.refresh(review)
        logger.info(
            f"Review {body.rating}/5 recorded",
            extra={"user_id": user.id, "offer_id": offer.id},
        )
        return review

    async def list_reviews(
        self, offer_id: uuid.UUID | None = None, user_id: uuid.UUID | None = None,
    ) -> list[OfferReview]:
        if not offer_id and not user_id:
            raise ValidationError("offer_id or user_id is required")
        query = select(OfferReview).order_by(OfferReview.created_at.desc())
        if offer_id:
            query = query.where(OfferReview.offer_id == offer_id)
        if user_id:
            query = query.where(OfferReview.reviewee_id == user_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _refresh_rating(self, user_id: uuid.UUID) -> None:
        result = await self.db.execute(
            select(OfferReview.rating).where(OfferReview.reviewee_id == user_id),
        )
        average, count = summarize_ratings(list(result.scalars().all()))
        rating = await self.db.scalar(
            select(UserRating).where(UserRating.user_id == user_id),
        )
        if rating is None:
            self.db.add(UserRating(user_id=user_id, rating=average, total_reviews=count))
        else:
            rating.rating = average
            rating.total_reviews = count
