"""Request Schemas — normalization and rejection rules enforced before the services run."""

import pytest
from pydantic import ValidationError

from agrilink.schemas.auth import RegisterRequest
from agrilink.schemas.offer import ComplaintCreate, OfferCreate
from agrilink.schemas.review import ReviewCreate
from agrilink.schemas.verification import VerificationSubmit

_REGISTRATION = {
    "email": "  Farmer@Example.COM ",
    "password": "secret123",
    "name": "Aung Aung",
    "user_type": "farmer",
    "account_type": "individual",
    "location": "Yangon",
    "region": "Yangon Region",
}


def test_register_normalizes_email():
    body = RegisterRequest(**_REGISTRATION)
    assert body.email == "farmer@example.com"


def test_register_rejects_malformed_email():
    with pytest.raises(ValidationError):
        RegisterRequest(**{**_REGISTRATION, "email": "not-an-email"})


def test_register_cannot_create_admin():
    with pytest.raises(ValidationError):
        RegisterRequest(**{**_REGISTRATION, "user_type": "admin"})


def test_register_requires_eight_character_password():
    with pytest.raises(ValidationError):
        RegisterRequest(**{**_REGISTRATION, "password": "short1"})


def test_register_rejects_blank_name():
    with pytest.raises(ValidationError):
        RegisterRequest(**{**_REGISTRATION, "name": "   "})


def test_offer_price_must_be_positive():
    with pytest.raises(ValidationError):
        OfferCreate(product_id="7b0d3c5e-8d0f-4b8a-9a8e-2f4a4b1c9d10", offer_price=0)


def test_offer_quantity_defaults_to_one():
    body = OfferCreate(
        product_id="7b0d3c5e-8d0f-4b8a-9a8e-2f4a4b1c9d10", offer_price=1200,
    )
    assert body.quantity == 1


def test_complaint_reason_is_stripped_and_required():
    assert ComplaintCreate(complaint_type="delivery_issue", reason="  broken  ").reason == "broken"
    with pytest.raises(ValidationError):
        ComplaintCreate(complaint_type="delivery_issue", reason="   ")
    with pytest.raises(ValidationError):
        ComplaintCreate(complaint_type="late_payment", reason="never paid")


def test_review_rating_bounds():
    offer_id = "7b0d3c5e-8d0f-4b8a-9a8e-2f4a4b1c9d10"
    with pytest.raises(ValidationError):
        ReviewCreate(offer_id=offer_id, rating=0)
    with pytest.raises(ValidationError):
        ReviewCreate(offer_id=offer_id, rating=6)
    assert ReviewCreate(offer_id=offer_id, rating=5).rating == 5


def test_verification_documents_limited_to_known_types():
    with pytest.raises(ValidationError):
        VerificationSubmit(documents={"passport": "data:image/png;base64,AAAA"})
    stored = "/uploads/verification/3f2a/9c1e.png"
    body = VerificationSubmit(documents={"id_card": stored, "business_license": ""})
    assert body.documents == {"id_card": stored}


@pytest.mark.parametrize("value", [
    "/uploads/../secrets.env",
    "/uploads/verification/../../secrets.env",
    "/uploads/products/abc/1.png",
    "https://cdn.example.com/id.png",
    "id_card.png",
])
def test_verification_documents_must_be_uploads(value):
    with pytest.raises(ValidationError):
        VerificationSubmit(documents={"id_card": value})
