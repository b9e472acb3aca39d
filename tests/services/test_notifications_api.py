"""Notification Routes — inbox listing and read state."""

import uuid

import pytest

from agrilink.models.notification import Notification


@pytest.fixture
def notify(test_db):
    async def _notify(user, title="Offer Accepted") -> Notification:
        row = Notification(
            id=uuid.uuid4(), user_id=user.id, type="offer_accepted",
            title=title, message=f"{title} message",
        )
        test_db.add(row)
        await test_db.commit()
        return row
    return _notify


async def test_inbox_newest_first_with_unread_count(client, buyer, notify, auth):
    await notify(buyer, "First")
    await notify(buyer, "Second")
    res = await client.get("/api/v1/notifications", headers=auth(buyer))
    data = res.json()
    assert [n["title"] for n in data["notifications"]] == ["Second", "First"]
    assert data["unread_count"] == 2


async def test_mark_one_read(client, buyer, notify, auth):
    row = await notify(buyer)
    res = await client.patch(f"/api/v1/notifications/{row.id}/read", headers=auth(buyer))
    assert res.status_code == 200
    assert res.json()["notification"]["is_read"] is True
    inbox = (await client.get("/api/v1/notifications", headers=auth(buyer))).json()
    assert inbox["unread_count"] == 0


async def test_cannot_mark_someone_elses(client, buyer, farmer, notify, auth):
    row = await notify(farmer)
    res = await client.patch(f"/api/v1/notifications/{row.id}/read", headers=auth(buyer))
    assert res.status_code == 403


async def test_mark_unknown_404(client, buyer, auth):
    res = await client.patch(f"/api/v1/notifications/{uuid.uuid4()}/read", headers=auth(buyer))
    assert res.status_code == 404


async def test_mark_all_read_only_touches_own(client, buyer, farmer, notify, auth):
    await notify(buyer)
    await notify(buyer)
    await notify(farmer)
    res = await client.patch("/api/v1/notifications/read-all", headers=auth(buyer))
    assert res.json()["updated"] == 2
    farmer_inbox = (await client.get("/api/v1/notifications", headers=auth(farmer))).json()
    assert farmer_inbox["unread_count"] == 1
