"""Maintenance Routes — admin scheduling and the public schedule notice.

Tests:
    - admins create, list, toggle and delete windows; others get 403
    - windows in the past or of 15 minutes or less are rejected
    - the public schedule shows the earliest active window within 24 hours
"""

from datetime import datetime, timedelta, timezone


def _window(start_in: timedelta, minutes: int, message: str = "Database upgrade") -> dict:
    start = datetime.now(timezone.utc) + start_in
    return {
        "start_time": start.isoformat(),
        "end_time": (start + timedelta(minutes=minutes)).isoformat(),
        "message": message,
    }


async def test_admin_schedules_maintenance(client, admin, auth):
    res = await client.post(
        "/api/v1/admin/maintenance", json=_window(timedelta(hours=2), 60), headers=auth(admin),
    )
    assert res.status_code == 201
    schedule = res.json()["schedule"]
    assert schedule["duration_minutes"] == 60
    assert schedule["is_active"] is True

    listed = await client.get("/api/v1/admin/maintenance", headers=auth(admin))
    assert [s["id"] for s in listed.json()["schedules"]] == [schedule["id"]]


async def test_schedules_listed_latest_first(client, admin, auth):
    for hours in (2, 30):
        await client.post(
            "/api/v1/admin/maintenance",
            json=_window(timedelta(hours=hours), 30), headers=auth(admin),
        )
    listed = (await client.get("/api/v1/admin/maintenance", headers=auth(admin))).json()
    starts = [s["start_time"] for s in listed["schedules"]]
    assert starts == sorted(starts, reverse=True)


async def test_maintenance_requires_admin(client, farmer, auth):
    res = await client.post(
        "/api/v1/admin/maintenance", json=_window(timedelta(hours=2), 60), headers=auth(farmer),
    )
    assert res.status_code == 403


async def test_invalid_windows_rejected(client, admin, auth):
    past = await client.post(
        "/api/v1/admin/maintenance", json=_window(timedelta(hours=-1), 60), headers=auth(admin),
    )
    assert past.status_code == 400
    short = await client.post(
        "/api/v1/admin/maintenance", json=_window(timedelta(hours=1), 15), headers=auth(admin),
    )
    assert short.status_code == 400
    assert short.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_public_schedule_shows_upcoming_window(client, admin, auth):
    empty = (await client.get("/api/v1/maintenance/schedule")).json()
    assert empty == {"maintenance": None, "should_show": False}

    await client.post(
        "/api/v1/admin/maintenance",
        json=_window(timedelta(hours=30), 60, "Later"), headers=auth(admin),
    )
    await client.post(
        "/api/v1/admin/maintenance",
        json=_window(timedelta(hours=5), 60, "Sooner"), headers=auth(admin),
    )
    await client.post(
        "/api/v1/admin/maintenance",
        json=_window(timedelta(hours=3), 60, "Soonest"), headers=auth(admin),
    )

    data = (await client.get("/api/v1/maintenance/schedule")).json()
    assert data["should_show"] is True
    assert data["maintenance"]["message"] == "Soonest"


async def test_cancelled_window_hidden_and_deleted(client, admin, auth):
    created = await client.post(
        "/api/v1/admin/maintenance", json=_window(timedelta(hours=2), 60), headers=auth(admin),
    )
    schedule_id = created.json()["schedule"]["id"]

    res = await client.patch(
        f"/api/v1/admin/maintenance/{schedule_id}",
        json={"is_active": False}, headers=auth(admin),
    )
    assert res.json()["message"] == "Maintenance cancelled"
    assert (await client.get("/api/v1/maintenance/schedule")).json()["should_show"] is False

    res = await client.patch(
        f"/api/v1/admin/maintenance/{schedule_id}",
        json={"is_active": True}, headers=auth(admin),
    )
    assert res.json()["message"] == "Maintenance activated"

    res = await client.delete(f"/api/v1/admin/maintenance/{schedule_id}", headers=auth(admin))
    assert res.status_code == 200
    missing = await client.delete(
        f"/api/v1/admin/maintenance/{schedule_id}", headers=auth(admin),
    )
    assert missing.status_code == 404
