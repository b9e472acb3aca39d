"""Auth Service — registration, login, email verification and password flows.

Invariants:
    - Registration creates the user with profile, verification (not_started),
      rating (0 / 0 reviews) and, for business accounts, business details
    - Email, reset and email-change tokens are single-use: cleared once
      consumed or expired
    - An email change only takes effect once the new address confirms it
    - Password-reset requests never reveal whether the email is registered
    - Mail delivery failures are logged, never surfaced to the caller

Design Decisions:
    - Token expiry checked here, not in SQL: expired tokens must be cleared,
      which needs the row anyway
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.config import get_settings
from agrilink.core.domain_types import AccountType, UserId, VerificationStatus
from agrilink.core.errors import (
    AuthenticationError, BusinessRuleError, ConflictError, ExternalServiceError,
    ResourceNotFoundError, ValidationError,
)
from agrilink.core.offer_workflow import ensure_utc
from agrilink.infrastructure import mailer
from agrilink.infrastructure.security import (
    create_access_token, generate_token, hash_password, verify_password,
)
from agrilink.models.business_details import BusinessDetails
from agrilink.models.user import User, UserProfile
from agrilink.models.user_verification import UserRating, UserVerification
from agrilink.schemas.auth import RegisterRequest
from agrilink.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

PASSWORD_RESET_MESSAGE = (
    "If an account with that email exists, a password reset link has been sent."
)


def issue_token(user: User) -> str:
    return create_access_token(
        str(user.id), user.email, user.user_type, user.account_type,
    )


class AuthService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: UserId) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower()),
        )
        return result.scalar_one_or_none()

    async def register(self, body: RegisterRequest) -> tuple[User, str]:
        if await self.get_by_email(body.email):
            raise ConflictError("User with this email already exists")

        settings = get_settings()
        location = await CatalogService(self.db).find_or_create_location(
            body.location, body.region,
        )
        user = User(
            email=body.email,
            password_hash=hash_password(body.password),
            name=body.name,
            user_type=body.user_type,
            account_type=body.account_type,
            email_verification_token=generate_token(),
            email_verification_expires=datetime.now(timezone.utc)
            + timedelta(hours=settings.email_verification_hours),
        )
        user.profile = UserProfile(location=location, phone=body.phone)
        user.verification = UserVerification(
            verification_status=VerificationStatus.NOT_STARTED.value,
        )
        user.rating = UserRating(rating=0.0, total_reviews=0)
        if body.account_type == AccountType.BUSINESS.value:
            user.business_details = BusinessDetails(business_name=body.business_name)
        else:
            user.business_details = None
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(
            f"Registered {body.user_type} account", extra={"user_id": user.id},
        )

        await self._send_verification(user)
        return user, issue_token(user)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        user = await self.get_by_email(email)
        if not user or not verify_password(user.password_hash, password):
            raise AuthenticationError("Invalid credentials")
        return user, issue_token(user)

    async def verify_email(self, token: str) -> User:
        result = await self.db.execute(
            select(User).where(User.email_verification_token == token),
        )
        user = result.scalar_one_or_none()
        if not user:
            raise ValidationError("Invalid verification token", field="token")
        if user.email_verified:
            return user
        expires = user.email_verification_expires
        if expires and ensure_utc(expires) < datetime.now(timezone.utc):
            raise ValidationError("Verification token has expired", field="token")

        user.email_verified = True
        user.email_verification_token = None
        user.email_verification_expires = None
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("Email verified", extra={"user_id": user.id})
        return user

    async def resend_verification(self, user: User) -> None:
        if user.email_verified:
            raise BusinessRuleError("Email is already verified", "EMAIL_ALREADY_VERIFIED")
        user.email_verification_token = generate_token()
        user.email_verification_expires = datetime.now(timezone.utc) + timedelta(
            hours=get_settings().email_verification_hours,
        )
        await self.db.commit()
        await self._send_verification(user)

    async def request_password_reset(self, email: str) -> str:
        user = await self.get_by_email(email)
        if not user:
            logger.info("Password reset requested for unknown email")
            return PASSWORD_RESET_MESSAGE

        user.password_reset_token = generate_token()
        user.password_reset_expires = datetime.now(timezone.utc) + timedelta(
            hours=get_settings().password_reset_hours,
        )
        await self.db.commit()
        try:
            await mailer.send_password_reset_email(
                user.email, user.name, user.password_reset_token,
            )
        except ExternalServiceError as e:
            logger.warning(
                f"Password reset email failed: {e.message}", extra={"user_id": user.id},
            )
        return PASSWORD_RESET_MESSAGE

    async def reset_password(self, token: str, new_password: str) -> None:
        result = await self.db.execute(
            select(User).where(User.password_reset_token == token),
        )
        user = result.scalar_one_or_none()
        if not user:
            raise ValidationError("Invalid or expired reset token", field="token")

        expires = user.password_reset_expires
        if not expires or ensure_utc(expires) < datetime.now(timezone.utc):
            user.password_reset_token = None
            user.password_reset_expires = None
            await self.db.commit()
            raise ValidationError("Reset token has expired", field="token")

        user.password_hash = hash_password(new_password)
        user.password_reset_token = None
        user.password_reset_expires = None
        await self.db.commit()
        logger.info("Password reset", extra={"user_id": user.id})

    async def change_password(
        self, user: User, current_password: str, new_password: str,
    ) -> None:
        if not verify_password(user.password_hash, current_password):
            raise ValidationError("Current password is incorrect", field="current_password")
        user.password_hash = hash_password(new_password)
        await self.db.commit()
        logger.info("Password changed", extra={"user_id": user.id})

    async def request_email_change(
        self, user: User, new_email: str, current_password: str,
    ) -> None:
        if new_email == user.email:
            raise BusinessRuleError(
                "New email must be different from the current one", "SAME_EMAIL",
            )
        if await self.get_by_email(new_email):
            raise ConflictError("Email is already in use")
        if not verify_password(user.password_hash, current_password):
            raise ValidationError("Current password is incorrect", field="current_password")

        user.pending_email = new_email
        user.email_change_token = generate_token()
        user.email_change_expires = datetime.now(timezone.utc) + timedelta(
            hours=get_settings().email_verification_hours,
        )
        await self.db.commit()
        logger.info("Email change requested", extra={"user_id": user.id})
        try:
            await mailer.send_email_change_email(
                new_email, user.name, user.email_change_token,
            )
        except ExternalServiceError as e:
            logger.warning(
                f"Email change email failed: {e.message}", extra={"user_id": user.id},
            )

    async def confirm_email_change(self, token: str) -> User:
        result = await self.db.execute(
            select(User).where(User.email_change_token == token),
        )
        user = result.scalar_one_or_none()
        if not user or not user.pending_email:
            raise ValidationError("Invalid email change token", field="token")

        expires = user.email_change_expires
        if not expires or ensure_utc(expires) < datetime.now(timezone.utc):
            self._clear_email_change(user)
            await self.db.commit()
            raise ValidationError("Email change token has expired", field="token")

        if await self.get_by_email(user.pending_email):
            self._clear_email_change(user)
            await self.db.commit()
            raise ConflictError("Email is already in use")

        user.email = user.pending_email
        user.email_verified = True
        self._clear_email_change(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("Email changed", extra={"user_id": user.id})
        return user

    @staticmethod
    def _clear_email_change(user: User) -> None:
        user.pending_email = None
        user.email_change_token = None
        user.email_change_expires = None

    async def _send_verification(self, user: User) -> None:
        try:
            await mailer.send_verification_email(
                user.email, user.name, user.email_verification_token,
            )
        except ExternalServiceError as e:
            logger.warning(
                f"Verification email failed: {e.message}", extra={"user_id": user.id},
            )
