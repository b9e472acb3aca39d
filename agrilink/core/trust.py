"""Trust Rules — verification badges, email-verification gate and rating aggregation.

Invariants:
    - Badge precedence: verified (business > individual) > under review > unverified
    - Only actions in EMAIL_VERIFIED_ACTIONS require a verified email
    - Rating average is rounded to 2 decimals; no ratings → (0.0, 0)
"""

from agrilink.core.domain_types import (
    AccountType, VerificationLevel, VerificationStatus,
)
from agrilink.core.errors import EmailVerificationRequiredError


EMAIL_VERIFIED_ACTIONS: dict[str, str] = {
    "create_product": "Please verify your email to create product listings",
    "edit_product": "Please verify your email to edit product listings",
    "delete_product": "Please verify your email to manage product listings",
    "make_offer": "Please verify your email to make offers",
    "accept_offer": "Please verify your email to accept offers",
    "reject_offer": "Please verify your email to manage offers",
    "send_message": "Please verify your email to send messages",
    "reply_message": "Please verify your email to reply to messages",
    "submit_verification": "Please verify your email to submit verification requests",
}


def verification_level(
    verified: bool | None,
    account_type: str | None,
    verification_status: str | None = None,
    verification_submitted: bool | None = None,
) -> VerificationLevel:
    """Badge shown beside a user's name."""
    if verified:
        if account_type == AccountType.BUSINESS.value:
            return VerificationLevel.BUSINESS_VERIFIED
        return VerificationLevel.ID_VERIFIED
    if verification_status == VerificationStatus.UNDER_REVIEW.value or verification_submitted:
        return VerificationLevel.UNDER_REVIEW
    return VerificationLevel.UNVERIFIED


def requires_email_verification(action: str) -> bool:
    return action in EMAIL_VERIFIED_ACTIONS


def check_email_verified(email_verified: bool, action: str) -> None:
    """Raise when an unverified user attempts a restricted action."""
    if requires_email_verification(action) and not email_verified:
        raise EmailVerificationRequiredError(
            EMAIL_VERIFIED_ACTIONS[action], action=action,
        )


def summarize_ratings(ratings: list[int]) -> tuple[float, int]:
    """(average rounded to 2 decimals, count)."""
    if not ratings:
        return 0.0, 0
    return round(sum(ratings) / len(ratings), 2), len(ratings)
