"""Domain Types — identity wrappers and persisted enum values."""

from uuid import uuid4

from agrilink.core.domain_types import (
    ConversationId, OfferId, OfferStatus, ProductId, UserId,
    VerificationLevel, VerificationStatus,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert UserId(uid) == uid
    assert ProductId(uid) == uid
    assert OfferId(uid) == uid
    assert ConversationId(uid) == uid


def test_offer_status_values():
    assert {s.value for s in OfferStatus} == {
        "pending", "accepted", "rejected", "to_ship", "shipped",
        "delivered", "received", "completed", "cancelled", "expired",
    }


def test_under_review_spelling_differs_between_record_and_badge():
    assert VerificationStatus.UNDER_REVIEW.value == "under-review"
    assert VerificationLevel.UNDER_REVIEW.value == "under-review"


def test_enums_are_strings():
    assert OfferStatus.PENDING == "pending"
