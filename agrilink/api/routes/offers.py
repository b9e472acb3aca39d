"""Offer Routes — make offers, follow and drive their status, file complaints."""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.api.dependencies import get_current_user
from agrilink.infrastructure.database import get_db
from agrilink.models.user import User
from agrilink.schemas.offer import ComplaintCreate, OfferCreate, OfferStatusUpdate
from agrilink.services.offer_service import OfferService

router = APIRouter(prefix="/api/v1/offers", tags=["offers"])


@router.get("")
async def list_offers(
    type: Literal["sent", "received", "all"] = Query("all"),
    status_filter: str | None = Query(None, alias="status"),
    conversation_id: UUID | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    offers = await OfferService(db).list_offers(user, type, status_filter, conversation_id)
    return {"offers": [serializers.offer(o) for o in offers]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_offer(
    body: OfferCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    offer = await OfferService(db).create_offer(user, body)
    return {"offer": serializers.offer(offer), "message": "Offer created successfully"}


@router.get("/{offer_id}")
async def get_offer(
    offer_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = OfferService(db)
    offer = await service.get_offer(user, offer_id)
    timeline = await service.recent_timeline(offer.id)
    return {
        "offer": serializers.offer(offer),
        "timeline": [serializers.timeline_event(e) for e in timeline],
    }


@router.put("/{offer_id}")
async def update_offer_status(
    offer_id: UUID,
    body: OfferStatusUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    offer = await OfferService(db).update_status(
        user, offer_id, body.status, body.cancellation_reason,
    )
    return {"offer": serializers.offer(offer), "message": "Offer status updated successfully"}


@router.post("/{offer_id}/complaint", status_code=status.HTTP_201_CREATED)
async def file_complaint(
    offer_id: UUID,
    body: ComplaintCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    complaint = await OfferService(db).file_complaint(user, offer_id, body)
    return {
        "complaint": serializers.complaint(complaint),
        "message": "Complaint submitted successfully. Our support team will review your case.",
    }


@router.get("/{offer_id}/complaint")
async def get_complaint(
    offer_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    complaint, show_reason = await OfferService(db).get_complaint(user, offer_id)
    if complaint is None:
        return {"complaint": None, "message": "No complaint found"}
    return {"complaint": serializers.complaint(complaint, show_reason=show_reason)}
