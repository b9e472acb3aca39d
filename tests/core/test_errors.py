"""Error Hierarchy — HTTP status mapping and the response envelope."""

from agrilink.core.errors import (
    AuthenticationError, ConflictError, DatabaseError, EmailVerificationRequiredError,
    ResourceNotFoundError, ValidationError,
)


def test_not_found_envelope():
    err = ResourceNotFoundError("Offer", "abc")
    body = err.to_response()["error"]
    assert err.http_status == 404
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["message"] == "Offer 'abc' not found"
    assert body["context"]["resource_id"] == "abc"


def test_status_codes():
    assert ValidationError("bad").http_status == 400
    assert AuthenticationError().http_status == 401
    assert ConflictError("dup").http_status == 409
    assert DatabaseError("down", "execute").http_status == 503


def test_email_verification_error_records_action():
    err = EmailVerificationRequiredError("verify first", action="send_message")
    assert err.to_response()["error"]["context"]["action"] == "send_message"
    assert err.code == "EMAIL_VERIFICATION_REQUIRED"
