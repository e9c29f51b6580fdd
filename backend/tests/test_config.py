"""Tests for environment configuration."""
from locust_tracker.config import Settings, get_database_url

ALIASED = ("INGEST_API_KEY", "LOCUST_INGEST_API_KEY", "ALERT_EMAIL_FROM", "MAILGUN_FROM", "ALERT_EMAIL_TO", "MAILGUN_TO")


def clear_aliased(monkeypatch):
    for name in ALIASED:
        monkeypatch.delenv(name, raising=False)


def test_reads_primary_names(monkeypatch):
    clear_aliased(monkeypatch)
    monkeypatch.setenv("INGEST_API_KEY", "primary-key")
    monkeypatch.setenv("ALERT_EMAIL_FROM", "tracker@example.com")
    monkeypatch.setenv("ALERT_EMAIL_TO", "ops@example.com")

    config = Settings()

    assert config.ingest_api_key == "primary-key"
    assert config.alert_email_from == "tracker@example.com"
    assert config.alert_email_to == "ops@example.com"


def test_accepts_legacy_names(monkeypatch):
    clear_aliased(monkeypatch)
    monkeypatch.setenv("LOCUST_INGEST_API_KEY", "legacy-key")
    monkeypatch.setenv("MAILGUN_FROM", "alerts@mg.example.com")
    monkeypatch.setenv("MAILGUN_TO", "owner@example.com")

    config = Settings()

    assert config.ingest_api_key == "legacy-key"
    assert config.alert_email_from == "alerts@mg.example.com"
    assert config.alert_email_to == "owner@example.com"


def test_heroku_style_postgres_url_is_normalised(test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "database_url", "postgres://u:p@db:5432/locust")

    assert get_database_url() == "postgresql+asyncpg://u:p@db:5432/locust"
