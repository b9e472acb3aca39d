"""User Routes — profile, storefront, social links, addresses, saved products and reports."""

ADDRESS = {
    "label": "Farm",
    "full_name": "Mya Buyer",
    "address_line1": "12 Bogyoke Road",
    "city": "Yangon",
}


async def test_update_profile_resolves_location(client, buyer, auth):
    res = await client.put(
        "/api/v1/users/me/profile",
        json={"name": "  Mya Mya  ", "phone": "09-123456", "location": "Bago", "region": "Bago Region"},
        headers=auth(buyer),
    )
    assert res.status_code == 200
    user = res.json()["user"]
    assert user["name"] == "Mya Mya"
    assert user["phone"] == "09-123456"
    assert user["city"] == "Bago"
    assert user["location"] == "Bago, Bago Region"


async def test_storefront_update_and_public_view(client, farmer, product, auth):
    res = await client.put(
        "/api/v1/users/me/storefront",
        json={"business_name": "Aung Rice Farm", "about": "Family farm since 1998"},
        headers=auth(farmer),
    )
    assert res.json()["business_details"]["business_name"] == "Aung Rice Farm"

    by_id = (await client.get(f"/api/v1/users/{farmer.id}/storefront")).json()
    assert by_id["seller"]["business_name"] == "Aung Rice Farm"
    assert by_id["about"] == "Family farm since 1998"
    assert [p["id"] for p in by_id["products"]] == [str(product.id)]
    assert "email" not in by_id["seller"]

    by_email = await client.get(f"/api/v1/users/{farmer.email}/storefront")
    assert by_email.json()["seller"]["id"] == str(farmer.id)


async def test_storefront_unknown_key(client):
    assert (await client.get("/api/v1/users/nobody@example.com/storefront")).status_code == 404
    assert (await client.get("/api/v1/users/not-a-user/storefront")).status_code == 404


async def test_social_links_upsert_and_public_read(client, farmer, buyer, auth):
    empty = await client.get(f"/api/v1/users/{farmer.id}/social")
    assert empty.status_code == 200
    assert empty.json() == {"social": {}}

    res = await client.put(
        "/api/v1/users/me/social",
        json={"facebook": " aungricefarm ", "whatsapp": "+959123456", "tiktok": "  "},
        headers=auth(farmer),
    )
    assert res.status_code == 200
    social = res.json()["social"]
    assert social["facebook"] == "aungricefarm"
    assert social["tiktok"] is None

    await client.put(
        "/api/v1/users/me/social", json={"telegram": "aungfarm"}, headers=auth(farmer),
    )
    public = (await client.get(f"/api/v1/users/{farmer.id}/social")).json()["social"]
    assert public["facebook"] == "aungricefarm"
    assert public["telegram"] == "aungfarm"

    storefront = (await client.get(f"/api/v1/users/{farmer.id}/storefront")).json()
    assert storefront["social"]["whatsapp"] == "+959123456"
    assert (await client.get(f"/api/v1/users/{buyer.id}/social")).json() == {"social": {}}


async def test_social_links_require_auth_and_known_user(client):
    res = await client.put("/api/v1/users/me/social", json={"facebook": "x"})
    assert res.status_code == 401
    missing = await client.get("/api/v1/users/00000000-0000-0000-0000-000000000000/social")
    assert missing.status_code == 404


async def test_first_address_becomes_default(client, buyer, auth):
    res = await client.post("/api/v1/users/me/addresses", json=ADDRESS, headers=auth(buyer))
    assert res.status_code == 201
    assert res.json()["address"]["is_default"] is True


async def test_new_default_clears_previous(client, buyer, auth):
    first = (await client.post(
        "/api/v1/users/me/addresses", json=ADDRESS, headers=auth(buyer),
    )).json()["address"]
    second = (await client.post(
        "/api/v1/users/me/addresses",
        json={**ADDRESS, "label": "Shop", "is_default": True}, headers=auth(buyer),
    )).json()["address"]

    listed = (await client.get("/api/v1/users/me/addresses", headers=auth(buyer))).json()["addresses"]
    defaults = {a["id"]: a["is_default"] for a in listed}
    assert defaults == {first["id"]: False, second["id"]: True}
    assert listed[0]["id"] == second["id"]


async def test_deleting_default_promotes_remaining(client, buyer, auth):
    first = (await client.post(
        "/api/v1/users/me/addresses", json=ADDRESS, headers=auth(buyer),
    )).json()["address"]
    second = (await client.post(
        "/api/v1/users/me/addresses", json={**ADDRESS, "label": "Shop"}, headers=auth(buyer),
    )).json()["address"]
    assert second["is_default"] is False

    res = await client.delete(f"/api/v1/users/me/addresses/{first['id']}", headers=auth(buyer))
    assert res.status_code == 200
    listed = (await client.get("/api/v1/users/me/addresses", headers=auth(buyer))).json()["addresses"]
    assert [(a["id"], a["is_default"]) for a in listed] == [(second["id"], True)]


async def test_update_address_of_another_user(client, buyer, farmer, auth):
    address = (await client.post(
        "/api/v1/users/me/addresses", json=ADDRESS, headers=auth(buyer),
    )).json()["address"]
    res = await client.put(
        f"/api/v1/users/me/addresses/{address['id']}",
        json={"label": "Mine now"}, headers=auth(farmer),
    )
    assert res.status_code == 403


async def test_save_and_remove_product(client, buyer, product, auth):
    res = await client.post(
        "/api/v1/users/me/saved-products", json={"product_id": str(product.id)}, headers=auth(buyer),
    )
    assert res.status_code == 201
    assert res.json()["product_id"] == str(product.id)

    again = await client.post(
        "/api/v1/users/me/saved-products", json={"product_id": str(product.id)}, headers=auth(buyer),
    )
    assert again.status_code == 409

    saved = (await client.get("/api/v1/users/me/saved-products", headers=auth(buyer))).json()
    assert saved["saved_products"][0]["product"]["name"] == "Jasmine Rice"

    res = await client.delete(f"/api/v1/users/me/saved-products/{product.id}", headers=auth(buyer))
    assert res.status_code == 200
    missing = await client.delete(f"/api/v1/users/me/saved-products/{product.id}", headers=auth(buyer))
    assert missing.status_code == 404


async def test_report_user(client, buyer, farmer, auth):
    res = await client.post(
        f"/api/v1/users/{farmer.id}/report", json={"reason": "Spam"}, headers=auth(buyer),
    )
    assert res.status_code == 201

    own = await client.post(
        f"/api/v1/users/{buyer.id}/report", json={"reason": "Spam"}, headers=auth(buyer),
    )
    assert own.status_code == 400
    assert own.json()["error"]["code"] == "SELF_REPORT"
