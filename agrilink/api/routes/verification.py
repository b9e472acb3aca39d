"""Verification Routes — submit a trust-badge request and check its status."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.api.dependencies import get_current_user
from agrilink.infrastructure.database import get_db
from agrilink.models.user import User
from agrilink.schemas.verification import VerificationSubmit
from agrilink.services.verification_service import VerificationService

router = APIRouter(prefix="/api/v1/verification", tags=["verification"])


@router.post("/request")
async def submit_request(
    body: VerificationSubmit,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    request, existing = await VerificationService(db).submit(user, body)
    response.status_code = status.HTTP_200_OK if existing else status.HTTP_201_CREATED
    return {
        "request": serializers.verification_request(request),
        "existing": existing,
        "message": (
            "A verification request is already under review"
            if existing else "Verification request submitted successfully"
        ),
    }


@router.get("/status")
async def verification_status(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    latest = await VerificationService(db).latest_request(user.id)
    record = user.verification
    return {
        "verified": bool(record and record.verified),
        "verification_status": record.verification_status if record else "not_started",
        "verification_submitted": bool(record and record.verification_submitted),
        "verification_level": serializers.user_badge(user),
        "latest_request": serializers.verification_request(latest) if latest else None,
    }
