"""Tests for application settings."""

from docapproval.core.config import Settings, get_settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.database_url.startswith("sqlite")
        assert settings.approver_role_name == "Approver"
        assert settings.admin_role_name == "Administrator"
        assert settings.vote_max_attempts == 3
        assert settings.notification_timeout == 10.0
        assert settings.decision_webhook_url is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("APPROVER_ROLE_NAME", "Reviewer")
        monkeypatch.setenv("NOTIFICATION_TIMEOUT", "2.5")
        monkeypatch.setenv("DECISION_WEBHOOK_URL", "https://hooks.example.com/x")
        settings = Settings(_env_file=None)

        assert settings.approver_role_name == "Reviewer"
        assert settings.notification_timeout == 2.5
        assert settings.decision_webhook_url == "https://hooks.example.com/x"

    def test_celery_falls_back_to_redis(self):
        settings = Settings(_env_file=None, redis_url="redis://cache:6379/1")
        assert settings.celery_broker == "redis://cache:6379/1"
        assert settings.celery_backend == "redis://cache:6379/1"

        settings = Settings(_env_file=None, celery_broker_url="amqp://broker//")
        assert settings.celery_broker == "amqp://broker//"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
