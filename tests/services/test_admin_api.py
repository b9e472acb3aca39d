"""Admin Routes — stats, user restriction, product moderation, complaints, reports."""

import pytest


@pytest.fixture
async def delivered_complaint(client, product, buyer, farmer, auth):
    res = await client.post(
        "/api/v1/offers",
        json={"product_id": str(product.id), "offer_price": 48000, "quantity": 2},
        headers=auth(buyer),
    )
    offer_id = res.json()["offer"]["id"]
    await client.put(f"/api/v1/offers/{offer_id}", json={"status": "delivered"}, headers=auth(farmer))
    res = await client.post(
        f"/api/v1/offers/{offer_id}/complaint",
        json={"complaint_type": "delivery_issue", "reason": "Two bags missing"},
        headers=auth(buyer),
    )
    return res.json()["complaint"]


async def test_stats(client, product, buyer, admin, auth):
    await client.post(
        "/api/v1/offers",
        json={"product_id": str(product.id), "offer_price": 48000, "quantity": 1},
        headers=auth(buyer),
    )
    stats = (await client.get("/api/v1/admin/stats", headers=auth(admin))).json()["stats"]
    assert stats["total_users"] == 3
    assert stats["total_products"] == 1
    assert stats["active_products"] == 1
    assert stats["total_offers"] == 1
    assert stats["total_conversations"] == 1
    assert stats["open_complaints"] == 0


async def test_list_users_with_search(client, buyer, farmer, admin, auth):
    res = await client.get("/api/v1/admin/users", params={"search": "mya"}, headers=auth(admin))
    users = res.json()["users"]
    assert [u["id"] for u in users] == [str(buyer.id)]
    assert users[0]["email"] == buyer.email


async def test_restriction_toggle(client, buyer, admin, auth):
    res = await client.patch(f"/api/v1/admin/users/{buyer.id}/restriction", headers=auth(admin))
    assert res.json()["user"]["is_restricted"] is True
    assert (await client.get("/api/v1/auth/me", headers=auth(buyer))).status_code == 403

    res = await client.patch(f"/api/v1/admin/users/{buyer.id}/restriction", headers=auth(admin))
    assert res.json()["user"]["is_restricted"] is False
    assert (await client.get("/api/v1/auth/me", headers=auth(buyer))).status_code == 200


async def test_admin_cannot_restrict_self(client, admin, auth):
    res = await client.patch(f"/api/v1/admin/users/{admin.id}/restriction", headers=auth(admin))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "SELF_RESTRICTION"


async def test_deactivate_product(client, product, admin, auth):
    res = await client.patch(
        f"/api/v1/admin/products/{product.id}", json={"is_active": False}, headers=auth(admin),
    )
    assert res.json()["is_active"] is False
    assert (await client.get(f"/api/v1/products/{product.id}")).status_code == 404

    listed = (await client.get("/api/v1/admin/products", headers=auth(admin))).json()["products"]
    assert listed[0]["is_active"] is False


async def test_complaint_moderation(client, delivered_complaint, admin, auth):
    data = (await client.get("/api/v1/admin/complaints", headers=auth(admin))).json()
    assert data["stats"] == {"submitted": 1, "total": 1}
    listed = data["complaints"][0]
    assert listed["reason"] == "Two bags missing"
    assert listed["offer"]["product_name"] == "Jasmine Rice"
    assert listed["complainant"]["name"] == "Mya Buyer"

    res = await client.patch(
        f"/api/v1/admin/complaints/{delivered_complaint['id']}",
        json={"status": "resolved", "admin_notes": "Seller refunded two bags"},
        headers=auth(admin),
    )
    complaint = res.json()["complaint"]
    assert complaint["status"] == "resolved"
    assert complaint["admin_notes"] == "Seller refunded two bags"
    assert complaint["resolved_at"] is not None

    stats = (await client.get("/api/v1/admin/stats", headers=auth(admin))).json()["stats"]
    assert stats["open_complaints"] == 0


async def test_complaint_status_validated(client, delivered_complaint, admin, auth):
    res = await client.patch(
        f"/api/v1/admin/complaints/{delivered_complaint['id']}",
        json={"status": "closed"}, headers=auth(admin),
    )
    assert res.status_code == 400


async def test_user_reports_listed(client, buyer, farmer, admin, auth):
    await client.post(
        f"/api/v1/users/{farmer.id}/report",
        json={"reason": "Fake listing", "details": "Photos are stock images"},
        headers=auth(buyer),
    )
    reports = (await client.get("/api/v1/admin/user-reports", headers=auth(admin))).json()["reports"]
    assert reports[0]["reason"] == "Fake listing"
    assert reports[0]["reporter"]["id"] == str(buyer.id)
    assert reports[0]["reported_user"]["id"] == str(farmer.id)
