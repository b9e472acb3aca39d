"""Offer Workflow — status parsing, cancellation rules, notices and lazy expiry.

Tests cover:
    - parse_status accepts known statuses, rejects anything else
    - received is recorded as completed
    - seller cancellations need a reason of at least 10 characters
    - status_notice wording for the counterparty
    - compute_expiry / is_expired / effective_status
    - amount formatting for the conversation preview
"""

from datetime import datetime, timedelta, timezone

import pytest

from agrilink.core.domain_types import NotificationType, OfferStatus
from agrilink.core.errors import ValidationError
from agrilink.core.offer_workflow import (
    MIN_SELLER_CANCELLATION_REASON,
    compute_expiry,
    effective_status,
    ensure_utc,
    format_amount,
    is_expired,
    offer_created_summary,
    parse_status,
    resolve_final_status,
    status_notice,
    timeline_event_for,
    validate_cancellation,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# ─── parse_status / resolve_final_status ─────────────────────────

def test_parse_status_accepts_every_offer_status():
    for status in OfferStatus:
        assert parse_status(status.value) is status


def test_parse_status_rejects_unknown_value():
    with pytest.raises(ValidationError) as exc:
        parse_status("paid")
    assert exc.value.message == "Invalid status"
    assert exc.value.field == "status"


def test_received_is_recorded_as_completed():
    assert resolve_final_status(OfferStatus.RECEIVED) == OfferStatus.COMPLETED


def test_other_statuses_pass_through():
    assert resolve_final_status(OfferStatus.SHIPPED) == OfferStatus.SHIPPED
    assert resolve_final_status(OfferStatus.CANCELLED) == OfferStatus.CANCELLED


# ─── validate_cancellation ───────────────────────────────────────

def test_seller_cancellation_requires_reason():
    with pytest.raises(ValidationError):
        validate_cancellation(True, None)


def test_seller_cancellation_rejects_short_reason():
    short = "x" * (MIN_SELLER_CANCELLATION_REASON - 1)
    with pytest.raises(ValidationError) as exc:
        validate_cancellation(True, short)
    assert exc.value.field == "cancellation_reason"


def test_seller_cancellation_reason_is_stripped():
    assert validate_cancellation(True, "  Out of stock now  ") == "Out of stock now"


def test_buyer_cancellation_reason_is_optional():
    assert validate_cancellation(False, None) is None
    assert validate_cancellation(False, "   ") is None
    assert validate_cancellation(False, "changed mind") == "changed mind"


# ─── timeline / notices ──────────────────────────────────────────

def test_timeline_event_for_to_ship():
    assert timeline_event_for(OfferStatus.TO_SHIP) == ("preparing", "To ship")
    assert timeline_event_for(OfferStatus.PENDING) == ("created", "Created")


def test_accept_notice_names_the_actor():
    notice = status_notice(OfferStatus.ACCEPTED, "Jasmine Rice", "Aung")
    assert notice.type == NotificationType.OFFER_ACCEPTED
    assert notice.title == "Offer Accepted"
    assert notice.message == 'Aung accepted your offer for "Jasmine Rice"'


def test_reject_notice_uses_rejected_type():
    notice = status_notice(OfferStatus.REJECTED, "Onions", "Mya")
    assert notice.type == NotificationType.OFFER_REJECTED


def test_fulfilment_notices():
    assert status_notice(OfferStatus.SHIPPED, "Onions", "Mya").title == "Order Shipped"
    assert status_notice(OfferStatus.TO_SHIP, "Onions", "Mya").title == "Ready to Ship"
    notice = status_notice(OfferStatus.DELIVERED, "Onions", "Mya")
    assert notice.message == 'Your order for "Onions" has been delivered'


def test_cancel_notice():
    notice = status_notice(OfferStatus.CANCELLED, "Onions", "Mya")
    assert notice.title == "Order Cancelled"


# ─── expiry ──────────────────────────────────────────────────────

def test_compute_expiry_uses_requested_hours():
    assert compute_expiry(NOW, 48, 24) == NOW + timedelta(hours=48)


def test_compute_expiry_falls_back_to_default():
    assert compute_expiry(NOW, None, 24) == NOW + timedelta(hours=24)
    assert compute_expiry(NOW, 0, 24) == NOW + timedelta(hours=24)


def test_pending_offer_past_expiry_is_expired():
    assert is_expired("pending", NOW - timedelta(minutes=1), NOW)
    assert not is_expired("pending", NOW + timedelta(minutes=1), NOW)


def test_only_pending_offers_expire():
    past = NOW - timedelta(days=3)
    assert not is_expired("accepted", past, NOW)
    assert not is_expired("pending", None, NOW)


def test_naive_expiry_treated_as_utc():
    naive = (NOW - timedelta(hours=1)).replace(tzinfo=None)
    assert ensure_utc(naive).tzinfo is timezone.utc
    assert is_expired("pending", naive, NOW)


def test_effective_status_reports_expired():
    past = NOW - timedelta(hours=1)
    assert effective_status("pending", past, NOW) == "expired"
    assert effective_status("shipped", past, NOW) == "shipped"


# ─── formatting ──────────────────────────────────────────────────

def test_format_amount_drops_trailing_zeros():
    assert format_amount(1500.0) == "1500"
    assert format_amount(1500.5) == "1500.5"
    assert format_amount(0.25) == "0.25"


def test_offer_created_summary():
    assert offer_created_summary(1500.0, 3, None) == (
        "New offer: 1500 for 3 units - No message"
    )
    assert offer_created_summary(99.5, 1, "Can you deliver?") == (
        "New offer: 99.5 for 1 units - Can you deliver?"
    )
