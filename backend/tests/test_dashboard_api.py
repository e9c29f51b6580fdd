"""Tests for the dashboard endpoint."""
from datetime import timedelta

from sqlalchemy import update

from locust_tracker.models import Device

from .helpers import OUTSIDE_LAT, OUTSIDE_LNG, make_fix, post_fix


async def test_empty_dashboard(client):
    response = await client.get("/api/dashboard")

    assert response.status_code == 200
    assert response.json() == {
        "geofence": {
            "name": "Cosmos Greens, Bhiwadi",
            "center": {"lat": 28.2036569, "lng": 76.8400441},
            "radiusKm": 10.0,
        },
        "devices": [],
        "latestLocations": [],
        "recentAlerts": [],
    }


async def test_dashboard_aggregates_state(client, channels, clock):
    t0 = clock.now
    await post_fix(client, make_fix(device_id="a", timestamp="2026-10-19T10:00:00Z"))
    await post_fix(client, make_fix(device_id="a", latitude=OUTSIDE_LAT, longitude=OUTSIDE_LNG,
                                    timestamp="2026-10-19T10:05:00Z"))
    clock.now = t0 + timedelta(minutes=1)
    await post_fix(client, make_fix(device_id="b", timestamp="2026-10-19T10:03:00Z", battery=55))

    body = (await client.get("/api/dashboard")).json()

    assert [d["deviceId"] for d in body["devices"]] == ["a", "b"]
    device_a = body["devices"][0]
    assert device_a["lastGeofenceInside"] is False
    assert device_a["isActive"] is True

    latest = body["latestLocations"]
    assert [loc["deviceId"] for loc in latest] == ["a", "b"]
    assert latest[0]["isInGeofence"] is False
    assert latest[0]["timestamp"] == "2026-10-19T10:05:00"
    assert latest[1]["battery"] == 55

    alerts = body["recentAlerts"]
    assert [a["deviceId"] for a in alerts] == ["b", "a"]
    assert alerts[0]["emailSent"] is True
    assert alerts[0]["pushSent"] is True


async def test_inactive_devices_are_hidden(client, channels, clock, session):
    await post_fix(client, make_fix(device_id="a"))
    await post_fix(client, make_fix(device_id="b"))
    await session.execute(update(Device).where(Device.device_id == "b").values(is_active=False))
    await session.commit()

    body = (await client.get("/api/dashboard")).json()

    assert [d["deviceId"] for d in body["devices"]] == ["a"]
    assert len(body["latestLocations"]) == 2


async def test_recent_alerts_are_capped(client, channels, clock):
    for i in range(55):
        await post_fix(client, make_fix(device_id=f"device-{i}"))

    body = (await client.get("/api/dashboard")).json()

    assert len(body["recentAlerts"]) == 50
