"""Admin Service — platform stats and moderation of users, products, complaints.

Invariants:
    - Callers are admins (enforced by the route dependency)
    - An admin cannot restrict their own account
    - Resolving or dismissing a complaint stamps resolved_at
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.domain_types import ComplaintStatus, VerificationRequestStatus
from agrilink.core.errors import BusinessRuleError, ResourceNotFoundError
from agrilink.models.conversation import Conversation, Message
from agrilink.models.offer import Offer, OfferComplaint
from agrilink.models.product import Product
from agrilink.models.user import User
from agrilink.models.user_report import UserReport
from agrilink.models.user_verification import UserVerification
from agrilink.models.verification_request import VerificationRequest
from agrilink.services.product_service import ProductService

logger = logging.getLogger(__name__)

_CLOSED_COMPLAINTS = (ComplaintStatus.RESOLVED.value, ComplaintStatus.DISMISSED.value)


class AdminService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, column, *filters) -> int:
        return await self.db.scalar(select(func.count(column)).where(*filters)) or 0

    async def stats(self) -> dict:
        return {
            "total_users": await self._count(User.id),
            "total_products": await self._count(Product.id),
            "active_products": await self._count(Product.id, Product.is_active.is_(True)),
            "total_conversations": await self._count(Conversation.id),
            "total_messages": await self._count(Message.id),
            "verified_users": await self._count(
                UserVerification.id, UserVerification.verified.is_(True),
            ),
            "pending_verifications": await self._count(
                VerificationRequest.id,
                VerificationRequest.status.in_((
                    VerificationRequestStatus.PENDING.value,
                    VerificationRequestStatus.UNDER_REVIEW.value,
                )),
            ),
            "total_offers": await self._count(Offer.id),
            "open_complaints": await self._count(
                OfferComplaint.id, OfferComplaint.status.not_in(_CLOSED_COMPLAINTS),
            ),
        }

    # ─── Users ───────────────────────────────────────────────────

    async def list_users(
        self, search: str | None = None, user_type: str | None = None,
    ) -> list[User]:
        query = select(User).order_by(User.created_at.desc())
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        if user_type:
            query = query.where(User.user_type == user_type)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def toggle_restriction(self, admin: User, user_id: uuid.UUID) -> User:
        if admin.id == user_id:
            raise BusinessRuleError("You cannot restrict your own account", "SELF_RESTRICTION")
        user = await self.db.get(User, user_id)
        if not user:
            raise ResourceNotFoundError("User", str(user_id))
        user.is_restricted = not user.is_restricted
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(
            f"User {'restricted' if user.is_restricted else 'unrestricted'}",
            extra={"user_id": user.id},
        )
        return user

    # ─── Products ────────────────────────────────────────────────

    async def list_products(self) -> list[tuple[Product, int]]:
        result = await self.db.execute(select(Product).order_by(Product.created_at.desc()))
        return await ProductService(self.db).with_availability(list(result.scalars().all()))

    async def set_product_active(self, product_id: uuid.UUID, is_active: bool) -> Product:
        product = await ProductService(self.db).get_product(product_id, include_inactive=True)
        product.is_active = is_active
        await self.db.commit()
        await self.db.refresh(product)
        logger.info(
            f"Product {'activated' if is_active else 'deactivated'} by admin",
            extra={"product_id": product.id},
        )
        return product

    # ─── Complaints & reports ────────────────────────────────────

    async def list_complaints(self, status: str | None = None) -> tuple[list[OfferComplaint], dict]:
        query = select(OfferComplaint).order_by(OfferComplaint.created_at.desc())
        if status:
            query = query.where(OfferComplaint.status == status)
        result = await self.db.execute(query)
        summary = {
            "submitted": await self._count(
                OfferComplaint.id, OfferComplaint.status == ComplaintStatus.SUBMITTED.value,
            ),
            "total": await self._count(OfferComplaint.id),
        }
        return list(result.scalars().all()), summary

    async def update_complaint(
        self, complaint_id: uuid.UUID, status: str, admin_notes: str | None = None,
    ) -> OfferComplaint:
        complaint = await self.db.get(OfferComplaint, complaint_id)
        if not complaint:
            raise ResourceNotFoundError("Complaint", str(complaint_id))
        complaint.status = ComplaintStatus(status).value
        if admin_notes is not None:
            complaint.admin_notes = admin_notes
        complaint.resolved_at = (
            datetime.now(timezone.utc) if complaint.status in _CLOSED_COMPLAINTS else None
        )
        await self.db.commit()
        await self.db.refresh(complaint)
        logger.info(
            f"Complaint set to {complaint.status}", extra={"offer_id": complaint.offer_id},
        )
        return complaint

    async def list_user_reports(self) -> list[UserReport]:
        result = await self.db.execute(
            select(UserReport).order_by(UserReport.created_at.desc()),
        )
        return list(result.scalars().all())
