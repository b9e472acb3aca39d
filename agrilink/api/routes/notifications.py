"""Notification Routes — the caller's inbox."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.api.dependencies import get_current_user
from agrilink.infrastructure.database import get_db
from agrilink.models.user import User
from agrilink.services.notification_service import NotificationService

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    items, unread = await NotificationService(db).list_for_user(user.id)
    return {
        "notifications": [serializers.notification(n) for n in items],
        "unread_count": unread,
    }


@router.patch("/read-all")
async def mark_all_read(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    updated = await NotificationService(db).mark_all_read(user.id)
    return {"message": "All notifications marked as read", "updated": updated}


@router.patch("/{notification_id}/read")
async def mark_read(
    notification_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notification = await NotificationService(db).mark_read(user.id, notification_id)
    return {"notification": serializers.notification(notification)}
