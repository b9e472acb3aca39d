"""Domain Types — enums for every string-valued state stored in the database.

Invariants:
    - All valid states encoded as Enums — services never compare against bare literals
    - Enum values are the exact strings persisted in DB columns and returned in JSON

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - NewType identities over dataclass wrappers: zero runtime cost
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ProductId = NewType("ProductId", UUID)
OfferId = NewType("OfferId", UUID)
ConversationId = NewType("ConversationId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class UserType(str, Enum):
    """Marketplace role. Admins are created by seed, never by registration."""
    FARMER = "farmer"
    TRADER = "trader"
    BUYER = "buyer"
    ADMIN = "admin"


class AccountType(str, Enum):
    INDIVIDUAL = "individual"
    BUSINESS = "business"


class OfferStatus(str, Enum):
    """Offer lifecycle: pending → accepted → to_ship → shipped → delivered → received → completed."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    TO_SHIP = "to_ship"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    RECEIVED = "received"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class VerificationStatus(str, Enum):
    """user_verification.verification_status values."""
    NOT_STARTED = "not_started"
    UNDER_REVIEW = "under-review"
    VERIFIED = "verified"
    REJECTED = "rejected"


class VerificationRequestStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class VerificationLevel(str, Enum):
    """Trust badge shown next to a user."""
    BUSINESS_VERIFIED = "business-verified"
    ID_VERIFIED = "id-verified"
    UNDER_REVIEW = "under-review"
    UNVERIFIED = "unverified"


class NotificationType(str, Enum):
    OFFER_CREATED = "offer_created"
    OFFER_ACCEPTED = "offer_accepted"
    OFFER_REJECTED = "offer_rejected"
    OFFER_EXPIRED = "offer_expired"
    VERIFICATION = "verification"
    COMPLAINT = "complaint"


class ComplaintType(str, Enum):
    UNFAIR_CANCELLATION = "unfair_cancellation"
    DELIVERY_ISSUE = "delivery_issue"


class ComplaintStatus(str, Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class MessageType(str, Enum):
    TEXT = "text"
    OFFER = "offer"
    IMAGE = "image"


class AddressType(str, Enum):
    HOME = "home"
    WORK = "work"
    FARM = "farm"
    WAREHOUSE = "warehouse"
    OTHER = "other"
