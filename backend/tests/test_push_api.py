"""Tests for the push subscription endpoints."""
import asyncio

from sqlalchemy import select

from locust_tracker.models import PushSubscription

SUBSCRIPTION = {
    "endpoint": "https://fcm.googleapis.com/fcm/send/abc123",
    "keys": {"p256dh": "BNcRdreALRFXTkOOUHK1EtK2wtaz5Ry4YfYCA", "auth": "tBHItJI5svbpez7KI4CCXg"},
}


async def test_public_key_unconfigured(client):
    response = await client.get("/api/push/public-key")

    assert response.status_code == 200
    assert response.json() == {"publicKey": ""}


async def test_public_key_configured(client, test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "vapid_public_key", "BPublicKey")

    response = await client.get("/api/push/public-key")

    assert response.json() == {"publicKey": "BPublicKey"}


async def test_subscribe_creates_subscription(client, session):
    response = await client.post("/api/push/subscribe", json=SUBSCRIPTION)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    stored = (await session.execute(select(PushSubscription))).scalar_one()
    assert stored.endpoint == SUBSCRIPTION["endpoint"]
    assert stored.p256dh == SUBSCRIPTION["keys"]["p256dh"]


async def test_subscribe_upserts_by_endpoint(client, session):
    await client.post("/api/push/subscribe", json=SUBSCRIPTION)
    updated = {"endpoint": SUBSCRIPTION["endpoint"], "keys": {"p256dh": "new-key", "auth": "new-auth"}}

    await client.post("/api/push/subscribe", json=updated)

    stored = (await session.execute(select(PushSubscription))).scalars().all()
    assert len(stored) == 1
    assert stored[0].p256dh == "new-key"
    assert stored[0].auth == "new-auth"


async def test_subscribe_rejects_invalid_payload(client, session):
    response = await client.post(
        "/api/push/subscribe",
        json={"endpoint": "not-a-url", "keys": {"p256dh": "x", "auth": "y"}},
    )
    missing_keys = await client.post("/api/push/subscribe", json={"endpoint": SUBSCRIPTION["endpoint"]})

    assert response.status_code == 400
    assert missing_keys.status_code == 400
    assert (await session.execute(select(PushSubscription))).scalars().all() == []


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_concurrent_subscribes_for_one_endpoint(client, session):
    responses = await asyncio.gather(
        *(client.post("/api/push/subscribe", json=SUBSCRIPTION) for _ in range(5))
    )

    assert [r.status_code for r in responses] == [200] * 5
    stored = (await session.execute(select(PushSubscription))).scalars().all()
    assert len(stored) == 1
    assert stored[0].auth == SUBSCRIPTION["keys"]["auth"]
