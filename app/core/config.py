"""Application configuration via Pydantic Settings v2."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "SandboxSeeder"
    app_env: Literal["development", "testing", "staging", "production"] = "development"
    debug: bool = False

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # API
    api_host: str = "0.0.0.0"  # noqa: S104
    api_port: int = 8123

    # Document store
    gateway_backend: Literal["firestore", "memory"] = "firestore"
    firestore_emulator_host: str = "localhost:8080"
    firestore_project_id: str = "demo-project"
    firestore_database: str = "(default)"
    gateway_timeout_seconds: float = 10.0

    # Seeder
    seeder_default_count: int = 10
    seeder_allow_production: bool = False
    seeder_persist_timeout_seconds: float = 30.0
    seeder_max_concurrency: int = 16
    seeder_random_seed: int | None = None
    seeder_templates_dir: str | None = None

    @field_validator("firestore_emulator_host")
    @classmethod
    def validate_emulator_host(cls, v: str) -> str:
        """Validate emulator address format (host:port).

        Args:
            v: Emulator address string.

        Returns:
            Validated address.

        Raises:
            ValueError: If format is invalid.
        """
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(
                f"Invalid emulator host '{v}'. Expected format: 'host:port' (e.g., 'localhost:8080')"
            )
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def firestore_base_url(self) -> str:
        """Base URL of the emulator's documents REST resource."""
        return (
            f"http://{self.firestore_emulator_host}/v1/projects/"
            f"{self.firestore_project_id}/databases/{self.firestore_database}/documents"
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
