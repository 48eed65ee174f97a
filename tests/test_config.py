"""
Configuration Tests
"""

import pytest

from neurogate.config import DEFAULT_CORS_ORIGINS, get_settings


ENV_KEYS = [
    "NEUROGATE_AUDIT_CAPACITY",
    "NEUROGATE_CHALLENGE_TTL_SECONDS",
    "NEUROGATE_PROOF_SECRET",
    "NEUROGATE_PROOF_TTL_SECONDS",
    "NEUROGATE_CORS_ORIGINS",
    "NEUROGATE_LOG_LEVEL",
    "REDIS_PASSWORD",
]


@pytest.fixture
def fresh_settings(monkeypatch):
    """Clear the settings cache and the relevant environment."""
    monkeypatch.setattr("neurogate.config.load_dotenv", lambda: False)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestSettings:

    def test_defaults(self, fresh_settings):
        settings = get_settings()

        assert settings.audit_capacity == 50
        assert settings.challenge_ttl_seconds == 300
        assert settings.proof_ttl_seconds == 3600
        assert settings.cors_origins == DEFAULT_CORS_ORIGINS
        assert settings.fingerprints_enabled is False
        # Random per-process secret
        assert len(settings.proof_secret) == 64

    def test_environment_overrides(self, fresh_settings):
        fresh_settings.setenv("NEUROGATE_AUDIT_CAPACITY", "10")
        fresh_settings.setenv("NEUROGATE_PROOF_SECRET", "s3cret")
        fresh_settings.setenv("NEUROGATE_CORS_ORIGINS", "https://a.example, https://b.example")
        fresh_settings.setenv("NEUROGATE_LOG_LEVEL", "debug")
        fresh_settings.setenv("REDIS_PASSWORD", "pw")

        settings = get_settings()
        assert settings.audit_capacity == 10
        assert settings.proof_secret == "s3cret"
        assert settings.cors_origins == ("https://a.example", "https://b.example")
        assert settings.log_level == "DEBUG"
        assert settings.fingerprints_enabled is True

    def test_cached(self, fresh_settings):
        assert get_settings() is get_settings()
