"""Shared fixtures: a fresh SQLite database per test and an ASGI client."""
from datetime import datetime

import httpx
import pytest

from locust_tracker.config import settings
from locust_tracker.database import close_db, get_session_factory, init_db
from locust_tracker.main import app
from locust_tracker.services.alerter import alert_engine
from locust_tracker.services.email_sender import email_sender_service
from locust_tracker.services.push_sender import push_sender_service

from .helpers import API_KEY, CENTER_LAT, CENTER_LNG


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Point the app at a throwaway database and turn off real channels."""
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setattr(settings, "data_path", str(tmp_path))
    monkeypatch.setattr(settings, "ingest_api_key", API_KEY)
    monkeypatch.setattr(settings, "geofence_name", "Cosmos Greens, Bhiwadi")
    monkeypatch.setattr(settings, "geofence_center_lat", CENTER_LAT)
    monkeypatch.setattr(settings, "geofence_center_lng", CENTER_LNG)
    monkeypatch.setattr(settings, "geofence_radius_km", 10.0)
    monkeypatch.setattr(settings, "alert_cooldown_minutes", 30)
    for name in (
        "mailgun_api_key",
        "mailgun_domain",
        "smtp_host",
        "alert_email_from",
        "alert_email_to",
        "vapid_subject",
        "vapid_public_key",
        "vapid_private_key",
    ):
        monkeypatch.setattr(settings, name, None)
    return settings


@pytest.fixture
async def database(test_settings):
    await close_db()
    await init_db()
    yield
    await close_db()


@pytest.fixture
async def session(database):
    async with get_session_factory()() as s:
        yield s


@pytest.fixture
async def client(database):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class FakeClock:
    """Settable clock for the alert engine."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock(datetime(2026, 10, 19, 12, 0, 0))
    monkeypatch.setattr(alert_engine, "clock", fake)
    return fake


class ChannelRecorder:
    """Stand-in for the email and push senders."""

    def __init__(self):
        self.emails = []
        self.pushes = []
        self.email_result = True
        self.push_result = (1, 0)

    async def send_email(self, config, subject, body):
        self.emails.append((subject, body))
        if isinstance(self.email_result, Exception):
            raise self.email_result
        return self.email_result

    async def send_to_all_subscriptions(self, session, payload):
        self.pushes.append(payload)
        if isinstance(self.push_result, Exception):
            raise self.push_result
        return self.push_result


@pytest.fixture
def channels(monkeypatch):
    recorder = ChannelRecorder()
    monkeypatch.setattr(email_sender_service, "send_email", recorder.send_email)
    monkeypatch.setattr(push_sender_service, "send_to_all_subscriptions", recorder.send_to_all_subscriptions)
    return recorder


