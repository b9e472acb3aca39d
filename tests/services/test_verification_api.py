"""Verification & Admin Review — request submission, approval, rejection, badges."""

import base64
from pathlib import Path

from agrilink.config import get_settings

ID_CARD = "data:image/png;base64," + base64.b64encode(b"\x89PNG-id-card").decode()


async def _submit(client, auth, user, **body):
    return await client.post("/api/v1/verification/request", json=body, headers=auth(user))


async def test_submit_requires_verified_email(client, make_user, auth):
    user = await make_user("farmer", email_verified=False)
    res = await _submit(client, auth, user, documents={"id_card": ID_CARD})
    assert res.status_code == 403
    assert res.json()["error"]["context"]["action"] == "submit_verification"


async def test_submit_stores_documents_and_marks_under_review(client, farmer, auth):
    res = await _submit(client, auth, farmer, documents={"id_card": ID_CARD})
    assert res.status_code == 201
    request = res.json()["request"]
    assert request["status"] == "pending"
    assert request["request_type"] == "id_verification"
    assert request["documents"]["id_card"].startswith(f"/uploads/verification/{farmer.id}/")

    status = (await client.get("/api/v1/verification/status", headers=auth(farmer))).json()
    assert status["verification_status"] == "under-review"
    assert status["verification_submitted"] is True
    assert status["verification_level"] == "under-review"
    assert status["latest_request"]["id"] == request["id"]


async def test_resubmit_returns_open_request(client, farmer, auth):
    first = (await _submit(client, auth, farmer, documents={"id_card": ID_CARD})).json()
    again = await _submit(client, auth, farmer, documents={"id_card": ID_CARD})
    assert again.status_code == 200
    assert again.json()["existing"] is True
    assert again.json()["request"]["id"] == first["request"]["id"]


async def test_business_submission_updates_business_details(client, make_user, auth):
    shop = await make_user("trader", account_type="business")
    res = await _submit(
        client, auth, shop,
        business_name="Golden Harvest Co.", business_license_number="MM-12345",
    )
    assert res.json()["request"]["request_type"] == "business_verification"
    me = (await client.get("/api/v1/auth/me", headers=auth(shop))).json()["user"]
    assert me["business_details"]["business_license_number"] == "MM-12345"


async def test_admin_routes_require_admin(client, farmer, auth):
    res = await client.get("/api/v1/admin/verification-requests", headers=auth(farmer))
    assert res.status_code == 403
    assert res.json()["error"]["message"] == "Admin access required"


async def test_admin_approves_request(client, farmer, admin, auth):
    request_id = (await _submit(client, auth, farmer, documents={"id_card": ID_CARD})).json()["request"]["id"]

    listed = (await client.get(
        "/api/v1/admin/verification-requests", params={"status": "pending"}, headers=auth(admin),
    )).json()["requests"]
    assert listed[0]["user"]["email"] == farmer.email

    res = await client.post(
        f"/api/v1/admin/verification-requests/{request_id}/approve", headers=auth(admin),
    )
    assert res.status_code == 200
    assert res.json()["request"]["status"] == "approved"

    status = (await client.get("/api/v1/verification/status", headers=auth(farmer))).json()
    assert status["verified"] is True
    assert status["verification_status"] == "verified"
    assert status["verification_level"] == "id-verified"

    inbox = (await client.get("/api/v1/notifications", headers=auth(farmer))).json()
    assert inbox["notifications"][0]["title"] == "Verification Approved"

    again = await client.post(
        f"/api/v1/admin/verification-requests/{request_id}/approve", headers=auth(admin),
    )
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "REQUEST_ALREADY_DECIDED"


async def test_admin_rejects_request_and_moves_documents(client, farmer, admin, auth):
    request_id = (await _submit(client, auth, farmer, documents={"id_card": ID_CARD})).json()["request"]["id"]

    res = await client.post(
        f"/api/v1/admin/verification-requests/{request_id}/reject",
        json={"notes": "Photo is blurry"}, headers=auth(admin),
    )
    request = res.json()["request"]
    assert request["status"] == "rejected"
    assert request["documents"] is None
    moved = request["rejected_documents"]["id_card"]
    assert moved.startswith(f"/uploads/rejected_documents/{farmer.id}/")
    assert (Path(get_settings().upload_dir) / moved.removeprefix("/uploads/")).exists()

    status = (await client.get("/api/v1/verification/status", headers=auth(farmer))).json()
    assert status["verification_status"] == "rejected"
    assert status["verification_level"] == "unverified"

    inbox = (await client.get("/api/v1/notifications", headers=auth(farmer))).json()
    assert inbox["notifications"][0]["message"].endswith("Reason: Photo is blurry")

    resubmit = await _submit(client, auth, farmer, documents={"id_card": ID_CARD})
    assert resubmit.status_code == 201

async def test_submit_rejects_paths_outside_own_uploads(client, farmer, make_user, auth):
    escaped = await _submit(client, auth, farmer, documents={"id_card": "/uploads/../secrets.env"})
    assert escaped.status_code == 400

    other = await make_user("farmer")
    theirs = (await _submit(client, auth, other, documents={"id_card": ID_CARD})).json()
    borrowed = theirs["request"]["documents"]["id_card"]
    res = await _submit(client, auth, farmer, documents={"id_card": borrowed})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_resubmitting_own_stored_document_is_accepted(client, farmer, admin, auth):
    first = (await _submit(client, auth, farmer, documents={"id_card": ID_CARD})).json()["request"]
    await client.post(
        f"/api/v1/admin/verification-requests/{first['id']}/approve", headers=auth(admin),
    )
    res = await _submit(client, auth, farmer, documents={"id_card": first["documents"]["id_card"]})
    assert res.status_code == 201
    assert res.json()["request"]["documents"]["id_card"] == first["documents"]["id_card"]
