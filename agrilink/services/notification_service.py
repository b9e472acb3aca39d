"""Notification Service — per-user inbox writes and reads.

Invariants:
    - Writes only add to the session; the calling service owns the commit
    - Offer notifications link to /offers/{id}
    - Users only read or mark their own notifications
"""

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.domain_types import NotificationType
from agrilink.core.errors import PermissionDeniedError, ResourceNotFoundError
from agrilink.models.notification import Notification

logger = logging.getLogger(__name__)

_OFFER_DEFAULTS: dict[NotificationType, tuple[str, str]] = {
    NotificationType.OFFER_CREATED: ("New Offer Received", "You have received a new offer"),
    NotificationType.OFFER_ACCEPTED: ("Offer Accepted", "Your offer has been accepted"),
    NotificationType.OFFER_REJECTED: ("Offer Rejected", "Your offer has been rejected"),
    NotificationType.OFFER_EXPIRED: ("Offer Expired", "Your offer has expired"),
}


class NotificationService:

    def __init__(self, db: AsyncSession):
        self.db = db

    def create(
        self,
        user_id: uuid.UUID,
        type: NotificationType,
        title: str,
        message: str,
        link: str | None = None,
        offer_id: uuid.UUID | None = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id, type=type.value, title=title, message=message,
            link=link, offer_id=offer_id,
        )
        self.db.add(notification)
        logger.info(
            f"Notification '{title}' queued",
            extra={"user_id": user_id, "offer_id": offer_id},
        )
        return notification

    def notify_offer(
        self,
        user_id: uuid.UUID,
        offer_id: uuid.UUID,
        type: NotificationType,
        title: str | None = None,
        message: str | None = None,
    ) -> Notification:
        """Offer notification with per-type default wording."""
        default_title, default_message = _OFFER_DEFAULTS.get(
            type, ("Offer Update", "Your offer has been updated"),
        )
        return self.create(
            user_id, type, title or default_title, message or default_message,
            link=f"/offers/{offer_id}", offer_id=offer_id,
        )

    async def list_for_user(
        self, user_id: uuid.UUID, limit: int = 50,
    ) -> tuple[list[Notification], int]:
        """(newest-first notifications, unread count)."""
        result = await self.db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(limit),
        )
        unread = await self.db.scalar(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id, Notification.is_read.is_(False),
            ),
        )
        return list(result.scalars().all()), unread or 0

    async def mark_read(self, user_id: uuid.UUID, notification_id: uuid.UUID) -> Notification:
        notification = await self.db.get(Notification, notification_id)
        if not notification:
            raise ResourceNotFoundError("Notification", str(notification_id))
        if notification.user_id != user_id:
            raise PermissionDeniedError("You can only update your own notifications")
        notification.is_read = True
        await self.db.commit()
        return notification

    async def mark_all_read(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True),
        )
        await self.db.commit()
        return result.rowcount or 0
