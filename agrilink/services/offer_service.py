"""Offer Service — offer creation, status workflow, complaints and expiry.

Invariants:
    - Only the offer's buyer or seller reads or changes it
    - Every status change writes one timeline row and notifies the other party
    - Offer creation reuses the buyer/seller conversation for the product
      (either orientation) and posts the offer summary into it
    - Stock is validated against live reservations at creation time only

Design Decisions:
    - Rules come from core/offer_workflow.py and core/stock.py; this service
      only loads rows, applies descriptors and commits
    - Notifications share the request transaction: one commit per operation
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import and_, not_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.config import get_settings
from agrilink.core.domain_types import (
    ComplaintStatus, ComplaintType, ConversationId, NotificationType, OfferId,
    OfferStatus, UserType,
)
from agrilink.core.errors import (
    BusinessRuleError, PermissionDeniedError, ResourceNotFoundError,
)
from agrilink.core.offer_workflow import (
    RECENT_TIMELINE_LIMIT, compute_expiry, is_expired, offer_created_summary, parse_status,
    resolve_final_status, status_notice, timeline_event_for, validate_cancellation,
)
from agrilink.core.stock import validate_offer_quantity
from agrilink.core.trust import check_email_verified
from agrilink.models.conversation import Conversation
from agrilink.models.offer import Offer, OfferComplaint, OfferTimelineEvent
from agrilink.models.user import User
from agrilink.schemas.offer import ComplaintCreate, OfferCreate
from agrilink.services.notification_service import NotificationService
from agrilink.services.product_service import ProductService

logger = logging.getLogger(__name__)

# Complaint type → the only offer status it may be filed against
_COMPLAINT_STATUS: dict[ComplaintType, tuple[OfferStatus, str]] = {
    ComplaintType.UNFAIR_CANCELLATION: (
        OfferStatus.CANCELLED,
        "Unfair cancellation complaints can only be filed for cancelled orders",
    ),
    ComplaintType.DELIVERY_ISSUE: (
        OfferStatus.DELIVERED,
        "Order issue complaints can only be filed for delivered orders",
    ),
}


def _status_filter(status: OfferStatus, now: datetime):
    """Status predicate that agrees with the lazily expired status clients see."""
    lapsed = and_(
        Offer.status == OfferStatus.PENDING.value,
        Offer.expires_at.is_not(None),
        Offer.expires_at < now,
    )
    if status == OfferStatus.EXPIRED:
        return or_(Offer.status == OfferStatus.EXPIRED.value, lapsed)
    if status == OfferStatus.PENDING:
        return and_(Offer.status == OfferStatus.PENDING.value, not_(lapsed))
    return Offer.status == status.value


class OfferService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.notifications = NotificationService(db)

    async def create_offer(self, buyer: User, body: OfferCreate) -> Offer:
        check_email_verified(buyer.email_verified, "make_offer")
        if buyer.user_type == UserType.FARMER.value:
            raise BusinessRuleError("Farmers cannot make offers", "FARMER_CANNOT_OFFER")

        products = ProductService(self.db)
        product = await products.get_product(body.product_id)
        if product.seller_id == buyer.id:
            raise BusinessRuleError(
                "You cannot make an offer on your own product", "OWN_PRODUCT",
            )
        validate_offer_quantity(body.quantity, await products.available_for(product))

        now = datetime.now(timezone.utc)
        conversation = await self._conversation_for(buyer.id, product.seller_id, product.id)
        offer = Offer(
            id=uuid.uuid4(),
            product_id=product.id,
            buyer_id=buyer.id,
            seller_id=product.seller_id,
            conversation_id=conversation.id,
            offer_price=body.offer_price,
            quantity=body.quantity,
            message=body.message,
            delivery_address=body.delivery_address,
            delivery_options=body.delivery_options or None,
            payment_terms=body.payment_terms or None,
            status=OfferStatus.PENDING.value,
            expires_at=compute_expiry(
                now, body.expiration_hours,
                get_settings().offer_default_expiration_hours,
            ),
        )
        self.db.add(offer)
        await self.db.flush()

        conversation.last_message = offer_created_summary(
            body.offer_price, body.quantity, body.message,
        )
        conversation.last_message_time = now
        conversation.unread_count = (conversation.unread_count or 0) + 1

        event_type, description = timeline_event_for(OfferStatus.PENDING)
        self._add_timeline(offer, event_type, description, buyer.id, {
            "offer_price": body.offer_price, "quantity": body.quantity,
        })
        self.notifications.notify_offer(
            product.seller_id, offer.id, NotificationType.OFFER_CREATED,
            message=f'{buyer.name} made an offer for "{product.name}"',
        )
        await self.db.commit()
        await self.db.refresh(offer)
        logger.info(
            "Offer created",
            extra={"user_id": buyer.id, "offer_id": offer.id, "product_id": product.id},
        )
        return offer

    async def list_offers(
        self,
        user: User,
        type: str = "all",
        status: str | None = None,
        conversation_id: ConversationId | None = None,
    ) -> list[Offer]:
        filters = []
        if conversation_id:
            conversation = await self.db.get(Conversation, conversation_id)
            if not conversation:
                raise ResourceNotFoundError("Conversation", str(conversation_id))
            if user.id not in (conversation.buyer_id, conversation.seller_id):
                raise PermissionDeniedError("You are not a participant in this conversation")
            filters.append(Offer.conversation_id == conversation_id)

        if type == "sent":
            filters.append(Offer.buyer_id == user.id)
        elif type == "received":
            filters.append(Offer.seller_id == user.id)
        else:
            filters.append(or_(Offer.buyer_id == user.id, Offer.seller_id == user.id))
        if status:
            filters.append(_status_filter(parse_status(status), datetime.now(timezone.utc)))

        result = await self.db.execute(
            select(Offer).where(*filters).order_by(Offer.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_offer(self, user: User, offer_id: OfferId) -> Offer:
        offer = await self._load(offer_id)
        self._require_participant(user, offer)
        return offer

    async def recent_timeline(self, offer_id: OfferId) -> list[OfferTimelineEvent]:
        result = await self.db.execute(
            select(OfferTimelineEvent)
            .where(OfferTimelineEvent.offer_id == offer_id)
            .order_by(OfferTimelineEvent.created_at.desc())
            .limit(RECENT_TIMELINE_LIMIT),
        )
        return list(result.scalars().all())

    async def update_status(
        self,
        user: User,
        offer_id: OfferId,
        raw_status: str,
        cancellation_reason: str | None = None,
    ) -> Offer:
        requested = parse_status(raw_status)
        offer = await self._load(offer_id)
        self._require_participant(user, offer)
        now = datetime.now(timezone.utc)
        if is_expired(offer.status, offer.expires_at, now):
            self._expire(offer, now)
            await self.db.commit()
            raise BusinessRuleError("This offer has expired", "OFFER_EXPIRED")
        if requested == OfferStatus.ACCEPTED:
            check_email_verified(user.email_verified, "accept_offer")
        elif requested == OfferStatus.REJECTED:
            check_email_verified(user.email_verified, "reject_offer")

        final = resolve_final_status(requested)
        is_seller = offer.seller_id == user.id
        if final == OfferStatus.CANCELLED:
            offer.cancellation_reason = validate_cancellation(is_seller, cancellation_reason)
            offer.cancelled_by = user.id

        old_status = offer.status
        offer.status = final.value
        event_type, description = timeline_event_for(final)
        self._add_timeline(offer, event_type, description, user.id, {
            "old_status": old_status,
            "new_status": final.value,
            "changed_by": str(user.id),
            "changed_at": now.isoformat(),
        })

        notice = status_notice(requested, offer.product.name, user.name)
        recipient = offer.buyer_id if is_seller else offer.seller_id
        self.notifications.notify_offer(
            recipient, offer.id, notice.type, notice.title, notice.message,
        )
        await self.db.commit()
        await self.db.refresh(offer)
        logger.info(
            f"Offer {old_status} -> {final.value}",
            extra={"user_id": user.id, "offer_id": offer.id},
        )
        return offer

    async def file_complaint(
        self, user: User, offer_id: OfferId, body: ComplaintCreate,
    ) -> OfferComplaint:
        offer = await self._load(offer_id)
        if offer.buyer_id != user.id:
            raise PermissionDeniedError("Only buyers can file complaints")

        complaint_type = ComplaintType(body.complaint_type)
        required_status, message = _COMPLAINT_STATUS[complaint_type]
        if offer.status != required_status.value:
            raise BusinessRuleError(message, "COMPLAINT_NOT_ALLOWED")

        existing = await self.db.scalar(
            select(OfferComplaint.id).where(
                OfferComplaint.offer_id == offer.id,
                OfferComplaint.complainant_id == user.id,
            ),
        )
        if existing:
            raise BusinessRuleError(
                "You have already filed a complaint for this offer", "DUPLICATE_COMPLAINT",
            )

        complaint = OfferComplaint(
            offer_id=offer.id,
            complainant_id=user.id,
            reported_user_id=offer.seller_id,
            complaint_type=complaint_type.value,
            reason=body.reason,
            status=ComplaintStatus.SUBMITTED.value,
        )
        self.db.add(complaint)

        label = "Order Issue" if complaint_type == ComplaintType.DELIVERY_ISSUE else "Complaint"
        self.notifications.notify_offer(
            offer.seller_id, offer.id, NotificationType.OFFER_CREATED,
            f"{label} Filed",
            f'{user.name} has filed a {label.lower()} for order "{offer.product.name}". '
            "Please review the issue.",
        )
        await self.db.commit()
        await self.db.refresh(complaint)
        logger.info(
            f"Complaint filed ({complaint_type.value})",
            extra={"user_id": user.id, "offer_id": offer.id},
        )
        return complaint

    async def get_complaint(
        self, user: User, offer_id: OfferId,
    ) -> tuple[OfferComplaint | None, bool]:
        """(complaint visible to the caller, whether its reason may be shown)."""
        offer = await self._load(offer_id)
        self._require_participant(user, offer)
        result = await self.db.execute(
            select(OfferComplaint)
            .where(OfferComplaint.offer_id == offer.id)
            .order_by(OfferComplaint.created_at.desc())
            .limit(1),
        )
        complaint = result.scalar_one_or_none()
        if not complaint:
            return None, False
        if complaint.complainant_id == user.id:
            return complaint, True
        if complaint.reported_user_id == user.id:
            return complaint, complaint.complaint_type == ComplaintType.DELIVERY_ISSUE.value
        return None, False

    async def expire_stale_offers(self, now: datetime | None = None) -> int:
        """Move pending offers past expires_at to expired; returns how many."""
        now = now or datetime.now(timezone.utc)
        result = await self.db.execute(
            select(Offer).where(
                Offer.status == OfferStatus.PENDING.value,
                and_(Offer.expires_at.is_not(None), Offer.expires_at < now),
            ),
        )
        stale = list(result.scalars().all())
        for offer in stale:
            self._expire(offer, now)
        await self.db.commit()
        if stale:
            logger.info(f"Expired {len(stale)} stale offers")
        return len(stale)

    # ─── Helpers ─────────────────────────────────────────────────

    def _expire(self, offer: Offer, now: datetime) -> None:
        """Persist lazy expiry: status, timeline row and buyer notification."""
        offer.status = OfferStatus.EXPIRED.value
        event_type, description = timeline_event_for(OfferStatus.EXPIRED)
        self._add_timeline(offer, event_type, description, None, {
            "old_status": OfferStatus.PENDING.value,
            "new_status": OfferStatus.EXPIRED.value,
            "changed_at": now.isoformat(),
        })
        notice = status_notice(OfferStatus.EXPIRED, offer.product.name, "")
        self.notifications.notify_offer(
            offer.buyer_id, offer.id, notice.type, notice.title, notice.message,
        )

    async def _load(self, offer_id: OfferId) -> Offer:
        offer = await self.db.get(Offer, offer_id)
        if not offer:
            raise ResourceNotFoundError("Offer", str(offer_id))
        return offer

    @staticmethod
    def _require_participant(user: User, offer: Offer) -> None:
        if user.id not in (offer.buyer_id, offer.seller_id):
            raise PermissionDeniedError("You are not a participant in this offer")

    def _add_timeline(
        self,
        offer: Offer,
        event_type: str,
        description: str,
        user_id: uuid.UUID | None,
        data: dict,
    ) -> None:
        self.db.add(OfferTimelineEvent(
            offer_id=offer.id, event_type=event_type,
            event_description=description, event_data=data, user_id=user_id,
        ))

    async def _conversation_for(
        self, buyer_id: uuid.UUID, seller_id: uuid.UUID, product_id: uuid.UUID,
    ) -> Conversation:
        result = await self.db.execute(
            select(Conversation).where(
                Conversation.product_id == product_id,
                or_(
                    and_(Conversation.buyer_id == buyer_id, Conversation.seller_id == seller_id),
                    and_(Conversation.buyer_id == seller_id, Conversation.seller_id == buyer_id),
                ),
            ).limit(1),
        )
        conversation = result.scalar_one_or_none()
        if conversation:
            return conversation
        conversation = Conversation(
            id=uuid.uuid4(), buyer_id=buyer_id, seller_id=seller_id, product_id=product_id,
        )
        self.db.add(conversation)
        await self.db.flush()
        return conversation
