# tests/unit/test_config.py
"""
Unit tests for environment-driven settings.
"""

import logging

from brandswap.config import Settings


def _settings(monkeypatch, **env) -> Settings:
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return Settings(_env_file=None)


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("RECORD_STORE_PROVIDER", raising=False)
        settings = _settings(monkeypatch)

        assert settings.RECORD_STORE_PROVIDER == "contentstack"
        assert settings.REFINEMENT_PROVIDER == "gemini"
        assert settings.BRANDKIT_RULES_PATH == "brandkit.json"
        assert settings.BRANDKIT_TIMEOUT_SECONDS == 7.0
        assert settings.REFINEMENT_MAX_CONCURRENCY == 5

    def test_choices_normalized(self, monkeypatch):
        settings = _settings(monkeypatch, REFINEMENT_PROVIDER=" OpenAI ", RECORD_STORE_PROVIDER="MEMORY")
        assert settings.REFINEMENT_PROVIDER == "openai"
        assert settings.RECORD_STORE_PROVIDER == "memory"

    def test_trailing_slash_stripped(self, monkeypatch):
        settings = _settings(
            monkeypatch,
            CONTENTSTACK_BASE_URL="https://eu-api.contentstack.com/v3/",
            BRANDKIT_API_URL="https://brandkit.example.com/",
        )
        assert settings.CONTENTSTACK_BASE_URL == "https://eu-api.contentstack.com/v3"
        assert settings.BRANDKIT_API_URL == "https://brandkit.example.com"

    def test_cors_origins(self, monkeypatch):
        settings = _settings(monkeypatch, CORS_ORIGINS="http://localhost:3000, https://app.example.com,")
        assert settings.cors_origins == ["http://localhost:3000", "https://app.example.com"]

    def test_deprecated_model_warns(self, monkeypatch, caplog):
        with caplog.at_level(logging.WARNING):
            settings = _settings(monkeypatch, GEMINI_MODEL="gemini-pro")
        assert settings.GEMINI_MODEL == "gemini-pro"
        assert "deprecated" in caplog.text
