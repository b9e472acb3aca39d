"""Seller Option Routes — custom delivery options and payment terms.

Tests:
    - options are grouped by type and ordered by name
    - a duplicate active name → 409; a removed name can be added again
    - removal is scoped to the owner; buyers cannot keep options
"""

import uuid

from agrilink.models.seller_custom_option import SellerCustomOption

URL = "/api/v1/seller/custom-options"


async def test_options_grouped_and_sorted(client, farmer, auth):
    for body in (
        {"type": "delivery", "name": "River barge"},
        {"type": "payment", "name": "Cash on delivery"},
        {"type": "delivery", "name": "Farm pickup", "description": "Mon to Sat"},
    ):
        res = await client.post(URL, json=body, headers=auth(farmer))
        assert res.status_code == 201

    data = (await client.get(URL, headers=auth(farmer))).json()
    assert [o["name"] for o in data["delivery_options"]] == ["Farm pickup", "River barge"]
    assert data["delivery_options"][0]["description"] == "Mon to Sat"
    assert [o["name"] for o in data["payment_terms"]] == ["Cash on delivery"]


async def test_duplicate_option_conflicts(client, farmer, auth):
    body = {"type": "payment", "name": "KBZPay"}
    await client.post(URL, json=body, headers=auth(farmer))
    res = await client.post(URL, json={**body, "name": "  KBZPay "}, headers=auth(farmer))
    assert res.status_code == 409

    other_type = await client.post(
        URL, json={"type": "delivery", "name": "KBZPay"}, headers=auth(farmer),
    )
    assert other_type.status_code == 201


async def test_removed_option_is_soft_deleted_and_restorable(client, test_db, farmer, auth):
    created = await client.post(
        URL, json={"type": "delivery", "name": "Truck"}, headers=auth(farmer),
    )
    option_id = created.json()["option"]["id"]

    res = await client.delete(f"{URL}/{option_id}", headers=auth(farmer))
    assert res.status_code == 200
    assert (await client.get(URL, headers=auth(farmer))).json()["delivery_options"] == []
    row = await test_db.get(
        SellerCustomOption, uuid.UUID(option_id), populate_existing=True,
    )
    assert row.is_active is False

    again = await client.post(
        URL, json={"type": "delivery", "name": "Truck"}, headers=auth(farmer),
    )
    assert again.status_code == 201
    assert again.json()["option"]["id"] == option_id


async def test_cannot_remove_another_sellers_option(client, farmer, make_user, auth):
    other = await make_user("trader", name="Ko Trader")
    created = await client.post(
        URL, json={"type": "payment", "name": "Bank transfer"}, headers=auth(farmer),
    )
    option_id = created.json()["option"]["id"]
    res = await client.delete(f"{URL}/{option_id}", headers=auth(other))
    assert res.status_code == 404


async def test_buyers_cannot_keep_options(client, buyer, auth):
    res = await client.post(
        URL, json={"type": "delivery", "name": "Pickup"}, headers=auth(buyer),
    )
    assert res.status_code == 403
    assert (await client.get(URL, headers=auth(buyer))).status_code == 403


async def test_unknown_option_type_rejected(client, farmer, auth):
    res = await client.post(URL, json={"type": "barter", "name": "Rice"}, headers=auth(farmer))
    assert res.status_code == 400
