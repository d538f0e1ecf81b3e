"""
Unit tests for application settings.

Tests cover:
- Defaults matching the deployment environment
- Environment variable overrides
- Validation of enumerated settings
- The env file requirement outside production
"""

import pytest
from pydantic import ValidationError

from todo_api.config import Settings, clear_settings_cache, get_settings
from todo_api.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("ENV", "PORT", "MONGODB_URI", "LOG_LEVEL", "LOG_FORMAT", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.port == 5001
        assert settings.env == "development"
        assert settings.mongodb_database == "golang_db"
        assert settings.mongodb_collection == "todos"
        assert settings.cors_origins == ["http://localhost:5173"]
        assert settings.cors_allow_headers == ["Origin", "Content-Type", "Accept"]
        assert settings.is_development
        assert not settings.is_production

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("ENV", "PRODUCTION")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("MONGODB_URI", "mongodb://db.internal:27017")

        settings = Settings(_env_file=None)

        assert settings.env == "production"
        assert settings.is_production
        assert settings.port == 8080
        assert settings.mongodb_uri == "mongodb://db.internal:27017"

    def test_env_file_values_are_loaded(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("MONGODB_URI=mongodb://from-file:27017\nPORT=6000\n")

        settings = Settings(_env_file=str(env_file))

        assert settings.mongodb_uri == "mongodb://from-file:27017"
        assert settings.port == 6000

    def test_rejects_unknown_environment(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, env="qa")

    def test_rejects_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="verbose")

    def test_normalises_log_settings(self):
        settings = Settings(_env_file=None, log_level="debug", log_format="TEXT")

        assert settings.log_level == "DEBUG"
        assert settings.log_format == "text"

    def test_rejects_out_of_range_port(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, port=70000)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestRequireEnvFile:

    def test_missing_env_file_outside_production_fails(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = Settings()

        with pytest.raises(ConfigurationError):
            settings.require_env_file()

    def test_checked_env_file_is_the_one_loaded(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("MONGODB_URI=mongodb://from-env-file:27017\n")
        monkeypatch.chdir(tmp_path)

        settings = Settings()
        settings.require_env_file()

        assert settings.mongodb_uri == "mongodb://from-env-file:27017"

    def test_production_does_not_need_env_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = Settings(env="production")

        settings.require_env_file()
