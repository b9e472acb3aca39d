"""Chat Routes — conversations, messages, the email gate and read tracking."""

import uuid


async def _start(client, auth, user, product):
    return await client.post(
        "/api/v1/chat/conversations", json={"product_id": str(product.id)}, headers=auth(user),
    )


async def test_start_conversation_then_reuse(client, product, buyer, farmer, auth):
    first = await _start(client, auth, buyer, product)
    assert first.status_code == 201
    conversation = first.json()["conversation"]
    assert conversation["other_party"]["id"] == str(farmer.id)
    assert conversation["is_buyer"] is True
    assert first.json()["existing"] is False

    again = await _start(client, auth, buyer, product)
    assert again.status_code == 200
    assert again.json()["existing"] is True
    assert again.json()["conversation"]["id"] == conversation["id"]


async def test_cannot_chat_with_yourself(client, product, farmer, auth):
    res = await _start(client, auth, farmer, product)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "SELF_CONVERSATION"


async def test_send_and_read_messages(client, product, buyer, farmer, auth):
    conversation_id = (await _start(client, auth, buyer, product)).json()["conversation"]["id"]

    sent = await client.post(
        "/api/v1/chat/messages",
        json={"conversation_id": conversation_id, "content": "  Is the rice new crop?  "},
        headers=auth(buyer),
    )
    assert sent.status_code == 201
    assert sent.json()["message"]["content"] == "Is the rice new crop?"
    assert sent.json()["message"]["message_type"] == "text"

    await client.post(
        "/api/v1/chat/messages",
        json={"conversation_id": conversation_id, "content": "Yes, harvested last week"},
        headers=auth(farmer),
    )

    seller_view = (await client.get("/api/v1/chat/conversations", headers=auth(farmer))).json()
    conv = seller_view["conversations"][0]
    assert conv["is_buyer"] is False
    assert conv["other_party"]["id"] == str(buyer.id)
    assert conv["last_message"] == "Yes, harvested last week"
    assert conv["unread_count"] == 2

    messages = await client.get(
        f"/api/v1/chat/conversations/{conversation_id}/messages", headers=auth(buyer),
    )
    assert [m["content"] for m in messages.json()["messages"]] == [
        "Is the rice new crop?", "Yes, harvested last week",
    ]


async def test_mark_read_flips_other_party_messages(client, product, buyer, farmer, auth):
    conversation_id = (await _start(client, auth, buyer, product)).json()["conversation"]["id"]
    for text in ("Hello", "Still available?"):
        await client.post(
            "/api/v1/chat/messages",
            json={"conversation_id": conversation_id, "content": text},
            headers=auth(buyer),
        )

    res = await client.patch(f"/api/v1/chat/conversations/{conversation_id}", headers=auth(farmer))
    assert res.status_code == 200
    assert res.json()["updated"] == 2

    conv = (await client.get(
        f"/api/v1/chat/conversations/{conversation_id}", headers=auth(farmer),
    )).json()["conversation"]
    assert conv["unread_count"] == 0
    messages = (await client.get(
        f"/api/v1/chat/conversations/{conversation_id}/messages", headers=auth(farmer),
    )).json()["messages"]
    assert all(m["is_read"] for m in messages)


async def test_unverified_user_cannot_send(client, product, make_user, auth):
    buyer = await make_user("buyer", email_verified=False)
    conversation_id = (await _start(client, auth, buyer, product)).json()["conversation"]["id"]
    res = await client.post(
        "/api/v1/chat/messages",
        json={"conversation_id": conversation_id, "content": "Hi"},
        headers=auth(buyer),
    )
    assert res.status_code == 403
    assert res.json()["error"]["context"]["action"] == "send_message"


async def test_outsider_cannot_read_conversation(client, product, buyer, make_user, auth):
    conversation_id = (await _start(client, auth, buyer, product)).json()["conversation"]["id"]
    outsider = await make_user("trader")
    res = await client.get(f"/api/v1/chat/conversations/{conversation_id}", headers=auth(outsider))
    assert res.status_code == 403
    res = await client.post(
        "/api/v1/chat/messages",
        json={"conversation_id": conversation_id, "content": "Hi"},
        headers=auth(outsider),
    )
    assert res.status_code == 403


async def test_unknown_conversation_404(client, buyer, auth):
    res = await client.get(f"/api/v1/chat/conversations/{uuid.uuid4()}", headers=auth(buyer))
    assert res.status_code == 404
