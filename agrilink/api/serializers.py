"""Response Shaping — ORM rows to the JSON dicts returned by the routes.

Invariants:
    - Timestamps are ISO-8601 UTC; ids are strings
    - Public user summaries never include email or credential fields
    - Offer status is reported with lazy expiry applied
"""

from datetime import datetime, timezone

from agrilink.core.listing_format import format_location, format_unit
from agrilink.core.offer_workflow import effective_status, ensure_utc
from agrilink.core.trust import verification_level
from agrilink.models.address import Address
from agrilink.models.conversation import Conversation, Message
from agrilink.models.maintenance_schedule import MaintenanceSchedule
from agrilink.models.notification import Notification
from agrilink.models.offer import Offer, OfferComplaint, OfferReview, OfferTimelineEvent
from agrilink.models.product import Product
from agrilink.models.seller_custom_option import SellerCustomOption
from agrilink.models.user import User
from agrilink.models.user_report import UserReport
from agrilink.models.user_social import SOCIAL_FIELDS, UserSocial
from agrilink.models.verification_request import VerificationRequest


def iso(value: datetime | None) -> str | None:
    return ensure_utc(value).isoformat() if value else None


def _sid(value) -> str | None:
    return str(value) if value is not None else None


# ─── Users ───────────────────────────────────────────────────────

def user_badge(user: User) -> str:
    record = user.verification
    return verification_level(
        record.verified if record else False,
        user.account_type,
        record.verification_status if record else None,
        record.verification_submitted if record else None,
    ).value


def user_summary(user: User | None) -> dict | None:
    """Public view of a user (seller cards, chat partners, reviewers)."""
    if user is None:
        return None
    profile = user.profile
    location = profile.location if profile else None
    rating = user.rating
    business = user.business_details
    return {
        "id": str(user.id),
        "name": user.name,
        "user_type": user.user_type,
        "account_type": user.account_type,
        "business_name": business.business_name if business else None,
        "location": format_location(
            location.city if location else None, location.region if location else None,
        ),
        "profile_image": profile.profile_image if profile else None,
        "verified": bool(user.verification and user.verification.verified),
        "verification_level": user_badge(user),
        "rating": float(rating.rating) if rating else 0.0,
        "total_reviews": rating.total_reviews if rating else 0,
    }


def current_user(user: User) -> dict:
    """The caller's own account, including private fields."""
    profile = user.profile
    location = profile.location if profile else None
    record = user.verification
    data = user_summary(user)
    data.update({
        "email": user.email,
        "email_verified": user.email_verified,
        "is_restricted": user.is_restricted,
        "phone": profile.phone if profile else None,
        "about": profile.about if profile else None,
        "website": profile.website if profile else None,
        "city": location.city if location else None,
        "region": location.region if location else None,
        "phone_verified": bool(record and record.phone_verified),
        "verification_status": record.verification_status if record else "not_started",
        "verification_submitted": bool(record and record.verification_submitted),
        "business_details": business_details(user),
        "created_at": iso(user.created_at),
    })
    return data


def business_details(user: User) -> dict | None:
    details = user.business_details
    if details is None:
        return None
    return {
        "business_name": details.business_name,
        "business_description": details.business_description,
        "business_license_number": details.business_license_number,
        "business_hours": details.business_hours,
        "specialties": details.specialties,
        "policies": details.policies,
    }


# ─── Products ────────────────────────────────────────────────────

def _primary_image(product: Product) -> str | None:
    primary = next((img for img in product.images if img.is_primary), None)
    if primary is None and product.images:
        primary = product.images[0]
    return primary.image_url if primary else None


def product_listing(product: Product, available: int) -> dict:
    location = product.location
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "category": product.category.name if product.category else None,
        "price": product.price,
        "quantity": product.quantity,
        "quantity_unit": product.quantity_unit,
        "packaging": product.packaging,
        "unit": format_unit(product.quantity, product.quantity_unit, product.packaging),
        "stock": product.available_quantity,
        "available_quantity": available,
        "minimum_order": product.minimum_order,
        "location": format_location(
            location.city if location else None, location.region if location else None,
        ),
        "additional_notes": product.additional_notes,
        "delivery_options": product.delivery_options,
        "payment_terms": product.payment_terms,
        "image": _primary_image(product),
        "images": [img.image_url for img in product.images],
        "is_active": product.is_active,
        "seller": user_summary(product.seller),
        "created_at": iso(product.created_at),
        "updated_at": iso(product.updated_at),
    }


# ─── Offers ──────────────────────────────────────────────────────

def offer(o: Offer, now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)
    product = o.product
    return {
        "id": str(o.id),
        "status": effective_status(o.status, o.expires_at, now),
        "offer_price": o.offer_price,
        "quantity": o.quantity,
        "total": round(o.offer_price * o.quantity, 2),
        "message": o.message,
        "delivery_address": o.delivery_address,
        "delivery_options": o.delivery_options,
        "payment_terms": o.payment_terms,
        "expires_at": iso(o.expires_at),
        "cancelled_by": _sid(o.cancelled_by),
        "cancellation_reason": o.cancellation_reason,
        "conversation_id": _sid(o.conversation_id),
        "product": {
            "id": str(product.id),
            "name": product.name,
            "price": product.price,
            "unit": format_unit(product.quantity, product.quantity_unit, product.packaging),
            "image": _primary_image(product),
        } if product else None,
        "buyer": user_summary(o.buyer),
        "seller": user_summary(o.seller),
        "created_at": iso(o.created_at),
        "updated_at": iso(o.updated_at),
    }


def timeline_event(event: OfferTimelineEvent) -> dict:
    return {
        "id": str(event.id),
        "event_type": event.event_type,
        "event_description": event.event_description,
        "event_data": event.event_data,
        "user_id": _sid(event.user_id),
        "created_at": iso(event.created_at),
    }


def complaint(c: OfferComplaint, show_reason: bool = True) -> dict:
    data = {
        "id": str(c.id),
        "offer_id": str(c.offer_id),
        "complaint_type": c.complaint_type,
        "status": c.status,
        "created_at": iso(c.created_at),
    }
    if show_reason:
        data["reason"] = c.reason
    return data


def admin_complaint(c: OfferComplaint) -> dict:
    data = complaint(c)
    data.update({
        "admin_notes": c.admin_notes,
        "resolved_at": iso(c.resolved_at),
        "complainant": user_summary(c.complainant),
        "reported_user_id": str(c.reported_user_id),
        "offer": {
            "id": str(c.offer.id),
            "status": c.offer.status,
            "product_name": c.offer.product.name if c.offer.product else None,
        } if c.offer else None,
    })
    return data


def review(r: OfferReview) -> dict:
    return {
        "id": str(r.id),
        "offer_id": str(r.offer_id),
        "rating": r.rating,
        "comment": r.comment,
        "reviewer": user_summary(r.reviewer),
        "reviewee_id": str(r.reviewee_id),
        "created_at": iso(r.created_at),
    }


# ─── Chat & notifications ────────────────────────────────────────

def conversation(c: Conversation, viewer_id) -> dict:
    other = c.seller if c.buyer_id == viewer_id else c.buyer
    product = c.product
    return {
        "id": str(c.id),
        "product": {
            "id": str(product.id),
            "name": product.name,
            "price": product.price,
            "image": _primary_image(product),
        } if product else None,
        "other_party": user_summary(other),
        "is_buyer": c.buyer_id == viewer_id,
        "last_message": c.last_message,
        "last_message_time": iso(c.last_message_time),
        "unread_count": c.unread_count,
        "created_at": iso(c.created_at),
    }


def message(m: Message) -> dict:
    return {
        "id": str(m.id),
        "conversation_id": str(m.conversation_id),
        "sender_id": str(m.sender_id),
        "content": m.content,
        "message_type": m.message_type,
        "is_read": m.is_read,
        "created_at": iso(m.created_at),
    }


def notification(n: Notification) -> dict:
    return {
        "id": str(n.id),
        "type": n.type,
        "title": n.title,
        "message": n.message,
        "link": n.link,
        "offer_id": _sid(n.offer_id),
        "is_read": n.is_read,
        "created_at": iso(n.created_at),
    }


# ─── Verification, addresses, reports ────────────────────────────

def verification_request(r: VerificationRequest, include_user: bool = False) -> dict:
    data = {
        "id": str(r.id),
        "request_type": r.request_type,
        "status": r.status,
        "documents": r.documents,
        "rejected_documents": r.rejected_documents,
        "business_info": r.business_info,
        "review_notes": r.review_notes,
        "reviewed_at": iso(r.reviewed_at),
        "submitted_at": iso(r.submitted_at),
    }
    if include_user:
        data["user"] = user_summary(r.user)
        data["user"]["email"] = r.user.email
    return data


def address(a: Address) -> dict:
    return {
        "id": str(a.id),
        "address_type": a.address_type,
        "label": a.label,
        "full_name": a.full_name,
        "phone": a.phone,
        "address_line1": a.address_line1,
        "address_line2": a.address_line2,
        "city": a.city,
        "state": a.state,
        "postal_code": a.postal_code,
        "country": a.country,
        "instructions": a.instructions,
        "is_default": a.is_default,
        "created_at": iso(a.created_at),
    }


def user_report(r: UserReport) -> dict:
    return {
        "id": str(r.id),
        "reason": r.reason,
        "details": r.details,
        "status": r.status,
        "reporter": user_summary(r.reporter),
        "reported_user": user_summary(r.reported_user),
        "created_at": iso(r.created_at),
    }


def admin_user(user: User) -> dict:
    data = current_user(user)
    data.pop("business_details", None)
    return data


def maintenance_schedule(s: MaintenanceSchedule) -> dict:
    return {
        "id": str(s.id),
        "start_time": iso(s.start_time),
        "end_time": iso(s.end_time),
        "duration_minutes": s.duration_minutes,
        "message": s.message,
        "is_active": s.is_active,
        "created_at": iso(s.created_at),
    }


def custom_option(o: SellerCustomOption) -> dict:
    return {
        "id": str(o.id),
        "type": o.kind,
        "name": o.name,
        "description": o.description,
        "created_at": iso(o.created_at),
    }


def social_links(social: UserSocial | None) -> dict:
    if not social:
        return {}
    return {name: getattr(social, name) for name in SOCIAL_FIELDS}
