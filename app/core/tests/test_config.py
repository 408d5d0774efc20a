"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings, get_settings


def test_settings_has_defaults():
    """Settings should have sensible defaults."""
    settings = Settings()

    assert settings.app_name == "SandboxSeeder"
    assert settings.app_env == "development"
    assert settings.debug is False
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
    assert settings.api_port == 8123


def test_seeder_defaults():
    """Seeder settings default to a safe, non-deterministic local setup."""
    settings = Settings()

    assert settings.gateway_backend == "firestore"
    assert settings.firestore_emulator_host == "localhost:8080"
    assert settings.seeder_default_count == 10
    assert settings.seeder_allow_production is False
    assert settings.seeder_random_seed is None
    assert settings.seeder_templates_dir is None


def test_settings_is_development_property():
    """is_development should return True for development env."""
    settings = Settings(app_env="development")
    assert settings.is_development is True
    assert settings.is_production is False


def test_settings_is_production_property():
    """is_production should return True for production env."""
    settings = Settings(app_env="production")
    assert settings.is_development is False
    assert settings.is_production is True


def test_firestore_base_url():
    """Base URL should point at the emulator's documents resource."""
    settings = Settings(
        firestore_emulator_host="127.0.0.1:9090",
        firestore_project_id="sandbox",
    )

    assert settings.firestore_base_url == (
        "http://127.0.0.1:9090/v1/projects/sandbox/databases/(default)/documents"
    )


@pytest.mark.parametrize("host", ["localhost", "localhost:", ":8080", "localhost:port"])
def test_invalid_emulator_host_rejected(host):
    """Emulator host must be host:port."""
    with pytest.raises(ValidationError):
        Settings(firestore_emulator_host=host)


def test_get_settings_returns_singleton():
    """get_settings should return cached singleton."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2


def test_settings_from_environment(monkeypatch):
    """Settings should load from environment variables."""
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("GATEWAY_BACKEND", "memory")
    monkeypatch.setenv("SEEDER_RANDOM_SEED", "42")

    # Create new settings instance (not cached)
    settings = Settings()

    assert settings.app_name == "TestApp"
    assert settings.debug is True
    assert settings.log_level == "DEBUG"
    assert settings.gateway_backend == "memory"
    assert settings.seeder_random_seed == 42
