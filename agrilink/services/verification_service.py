"""Verification Service — trust-badge requests and their admin review.

Invariants:
    - At most one open (pending/under_review) request per user: resubmitting
      returns the open request instead of creating another
    - Approval sets the user's verification record to verified; rejection sets
      it to rejected and moves stored documents to the rejected set
    - Decided requests cannot be decided again
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.domain_types import (
    AccountType, NotificationType, VerificationRequestStatus, VerificationStatus,
)
from agrilink.core.errors import (
    BusinessRuleError, ResourceNotFoundError, ValidationError,
)
from agrilink.core.trust import check_email_verified
from agrilink.infrastructure.file_storage import (
    is_data_url, is_stored_upload, move_file, save_data_url,
)
from agrilink.models.business_details import BusinessDetails
from agrilink.models.user import User
from agrilink.models.user_verification import UserVerification
from agrilink.models.verification_request import VerificationRequest
from agrilink.schemas.verification import VerificationSubmit
from agrilink.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

_OPEN_STATUSES = (
    VerificationRequestStatus.PENDING.value,
    VerificationRequestStatus.UNDER_REVIEW.value,
)
_BUSINESS_FIELDS = ("business_name", "business_description", "business_license_number")


class VerificationService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.notifications = NotificationService(db)

    async def submit(
        self, user: User, body: VerificationSubmit,
    ) -> tuple[VerificationRequest, bool]:
        """(request, existing) — existing=True when an open request was reused."""
        check_email_verified(user.email_verified, "submit_verification")
        record = self._record(user)

        open_request = await self.latest_request(user.id, open_only=True)
        if open_request:
            record.verification_status = VerificationStatus.UNDER_REVIEW.value
            record.verification_submitted = True
            await self.db.commit()
            return open_request, True

        folder = f"verification/{user.id}"
        documents = {
            key: self._store_document(key, value, folder)
            for key, value in (body.documents or {}).items()
        }
        request_type = body.request_type or (
            "business_verification"
            if user.account_type == AccountType.BUSINESS.value
            else "id_verification"
        )
        request = VerificationRequest(
            user_id=user.id,
            request_type=request_type,
            status=VerificationRequestStatus.PENDING.value,
            documents=documents or None,
            business_info=body.business_info,
        )
        self.db.add(request)

        business_changes = body.model_dump(include=set(_BUSINESS_FIELDS), exclude_none=True)
        if business_changes:
            details = user.business_details
            if details is None:
                details = BusinessDetails()
                user.business_details = details
            for key, value in business_changes.items():
                setattr(details, key, value)

        record.verification_status = VerificationStatus.UNDER_REVIEW.value
        record.verification_submitted = True
        await self.db.commit()
        await self.db.refresh(request)
        logger.info(
            f"Verification request submitted ({request_type})", extra={"user_id": user.id},
        )
        return request, False

    async def latest_request(
        self, user_id: uuid.UUID, open_only: bool = False,
    ) -> VerificationRequest | None:
        query = select(VerificationRequest).where(VerificationRequest.user_id == user_id)
        if open_only:
            query = query.where(VerificationRequest.status.in_(_OPEN_STATUSES))
        result = await self.db.execute(
            query.order_by(VerificationRequest.submitted_at.desc()).limit(1),
        )
        return result.scalar_one_or_none()

    async def list_requests(self, status: str | None = None) -> list[VerificationRequest]:
        query = select(VerificationRequest).order_by(VerificationRequest.submitted_at.desc())
        if status:
            query = query.where(VerificationRequest.status == status)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def approve(
        self, admin: User, request_id: uuid.UUID, notes: str | None = None,
    ) -> VerificationRequest:
        request = await self._open_request(request_id)
        self._decide(request, admin, VerificationRequestStatus.APPROVED, notes)

        record = self._record(request.user)
        record.verified = True
        record.verification_status = VerificationStatus.VERIFIED.value
        self.notifications.create(
            request.user_id, NotificationType.VERIFICATION, "Verification Approved",
            "Your account has been verified. A verified badge now appears on your profile.",
            link="/profile",
        )
        await self.db.commit()
        await self.db.refresh(request)
        logger.info("Verification approved", extra={"user_id": request.user_id})
        return request

    async def reject(
        self, admin: User, request_id: uuid.UUID, notes: str | None = None,
    ) -> VerificationRequest:
        request = await self._open_request(request_id)
        self._decide(request, admin, VerificationRequestStatus.REJECTED, notes)

        folder = f"rejected_documents/{request.user_id}"
        request.rejected_documents = {
            key: move_file(path, folder) for key, path in (request.documents or {}).items()
        } or None
        request.documents = None

        record = self._record(request.user)
        record.verified = False
        record.verification_status = VerificationStatus.REJECTED.value
        record.verification_submitted = False
        message = "Your verification request was not approved."
        if notes:
            message = f"{message} Reason: {notes}"
        self.notifications.create(
            request.user_id, NotificationType.VERIFICATION, "Verification Rejected",
            message, link="/verify",
        )
        await self.db.commit()
        await self.db.refresh(request)
        logger.info("Verification rejected", extra={"user_id": request.user_id})
        return request

    # ─── Helpers ─────────────────────────────────────────────────

    async def _open_request(self, request_id: uuid.UUID) -> VerificationRequest:
        request = await self.db.get(VerificationRequest, request_id)
        if not request:
            raise ResourceNotFoundError("VerificationRequest", str(request_id))
        if request.status not in _OPEN_STATUSES:
            raise BusinessRuleError(
                f"Verification request already {request.status}", "REQUEST_ALREADY_DECIDED",
            )
        return request

    @staticmethod
    def _decide(
        request: VerificationRequest,
        admin: User,
        status: VerificationRequestStatus,
        notes: str | None,
    ) -> None:
        request.status = status.value
        request.reviewed_by = admin.id
        request.reviewed_at = datetime.now(timezone.utc)
        request.review_notes = notes

    @staticmethod
    def _store_document(key: str, value: str, folder: str) -> str:
        if is_data_url(value):
            return save_data_url(value, folder)
        if not is_stored_upload(value, folder):
            raise ValidationError(f"{key} must be one of your uploaded files", field=key)
        return value

    def _record(self, user: User) -> UserVerification:
        if user.verification is None:
            user.verification = UserVerification(user_id=user.id)
        return user.verification
