"""Offer Workflow — pure rules for offer status changes and their side-effect descriptors.

Invariants:
    - Only statuses listed in OfferStatus are accepted; anything else is a ValidationError
    - A buyer marking an offer "received" is recorded as "completed" (auto-complete)
    - Seller cancellations carry a reason of at least MIN_SELLER_CANCELLATION_REASON chars
    - A pending offer past expires_at is reported as expired
    - Functions are PURE: they return descriptors, the offer service applies them

Design Decisions:
    - Transitions are not restricted beyond the whitelist and participant check:
      sellers and buyers drive the fulfilment steps from their own dashboards
    - Timeline and notification content live here, next to the status list,
      so adding a status is a single-file change
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from agrilink.core.domain_types import NotificationType, OfferStatus
from agrilink.core.errors import ValidationError


MIN_SELLER_CANCELLATION_REASON: int = 10
RECENT_TIMELINE_LIMIT: int = 10

# Statuses whose quantity is reserved against a listing's stock
RESERVING_STATUSES: tuple[OfferStatus, ...] = (
    OfferStatus.PENDING, OfferStatus.ACCEPTED,
)

_TIMELINE_EVENTS: dict[OfferStatus, tuple[str, str]] = {
    OfferStatus.PENDING: ("created", "Created"),
    OfferStatus.ACCEPTED: ("accepted", "Accepted"),
    OfferStatus.REJECTED: ("rejected", "Rejected"),
    OfferStatus.TO_SHIP: ("preparing", "To ship"),
    OfferStatus.SHIPPED: ("shipped", "Shipped"),
    OfferStatus.DELIVERED: ("delivered", "Delivered"),
    OfferStatus.RECEIVED: ("received", "Received"),
    OfferStatus.COMPLETED: ("completed", "Completed"),
    OfferStatus.CANCELLED: ("cancelled", "Cancelled"),
    OfferStatus.EXPIRED: ("expired", "Expired"),
}


@dataclass(frozen=True)
class StatusNotice:
    """Notification descriptor for the party that did NOT make the change."""
    type: NotificationType
    title: str
    message: str


def parse_status(raw: str) -> OfferStatus:
    """Validate a client-supplied status string."""
    try:
        return OfferStatus(raw)
    except ValueError:
        raise ValidationError("Invalid status", field="status")


def resolve_final_status(requested: OfferStatus) -> OfferStatus:
    """Buyer confirming receipt completes the transaction."""
    if requested == OfferStatus.RECEIVED:
        return OfferStatus.COMPLETED
    return requested


def validate_cancellation(is_seller: bool, reason: str | None) -> str | None:
    """Return the normalized cancellation reason or raise for short seller reasons."""
    cleaned = reason.strip() if reason else None
    if is_seller and (not cleaned or len(cleaned) < MIN_SELLER_CANCELLATION_REASON):
        raise ValidationError(
            "Cancellation reason is required and must be at least "
            f"{MIN_SELLER_CANCELLATION_REASON} characters for seller cancellations",
            field="cancellation_reason",
        )
    return cleaned or None


def timeline_event_for(status: OfferStatus) -> tuple[str, str]:
    """(event_type, description) for a status change."""
    return _TIMELINE_EVENTS.get(
        status, ("status_updated", f"Status changed to {status.value}"),
    )


def status_notice(
    status: OfferStatus, product_name: str, actor_name: str,
) -> StatusNotice:
    """Notification sent to the counterparty after a status change."""
    if status == OfferStatus.ACCEPTED:
        return StatusNotice(
            NotificationType.OFFER_ACCEPTED, "Offer Accepted",
            f'{actor_name} accepted your offer for "{product_name}"',
        )
    if status == OfferStatus.REJECTED:
        return StatusNotice(
            NotificationType.OFFER_REJECTED, "Offer Rejected",
            f'{actor_name} rejected your offer for "{product_name}"',
        )
    if status == OfferStatus.CANCELLED:
        return StatusNotice(
            NotificationType.OFFER_REJECTED, "Order Cancelled",
            f'Your order for "{product_name}" has been cancelled',
        )
    if status == OfferStatus.EXPIRED:
        return StatusNotice(
            NotificationType.OFFER_EXPIRED, "Offer Expired",
            f'Your offer for "{product_name}" has expired',
        )
    fulfilment = {
        OfferStatus.TO_SHIP: ("Ready to Ship", "is ready to ship"),
        OfferStatus.SHIPPED: ("Order Shipped", "has been shipped"),
        OfferStatus.DELIVERED: ("Order Delivered", "has been delivered"),
        OfferStatus.RECEIVED: ("Order Received", "has been received"),
        OfferStatus.COMPLETED: ("Order Completed", "has been completed"),
    }
    if status in fulfilment:
        title, phrase = fulfilment[status]
        return StatusNotice(
            NotificationType.OFFER_CREATED, title,
            f'Your order for "{product_name}" {phrase}',
        )
    return StatusNotice(
        NotificationType.OFFER_CREATED, "Status Updated",
        f'Status updated to {status.value} for "{product_name}"',
    )


def ensure_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo; treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def compute_expiry(now: datetime, hours: int | None, default_hours: int) -> datetime:
    """expires_at for a new offer; missing or non-positive hours use the default."""
    return now + timedelta(hours=hours if hours and hours > 0 else default_hours)


def is_expired(status: str, expires_at: datetime | None, now: datetime) -> bool:
    """Only pending offers expire."""
    if status != OfferStatus.PENDING.value or expires_at is None:
        return False
    return ensure_utc(now) > ensure_utc(expires_at)


def effective_status(status: str, expires_at: datetime | None, now: datetime) -> str:
    """Status as reported to clients (lazy expiry)."""
    if is_expired(status, expires_at, now):
        return OfferStatus.EXPIRED.value
    return status


def format_amount(value: float) -> str:
    """1500.0 → '1500', 1500.5 → '1500.5'."""
    return f"{value:.2f}".rstrip("0").rstrip(".")


def offer_created_summary(price: float, quantity: int, message: str | None) -> str:
    """Conversation preview line written when an offer is made."""
    return (
        f"New offer: {format_amount(price)} for {quantity} units - "
        f"{message or 'No message'}"
    )
