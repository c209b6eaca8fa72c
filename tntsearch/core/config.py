"""Application configuration."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Environment variables will be loaded and validated using Pydantic.
    """

    app_name: str = "TNT Search"
    version: str = "0.1.0"
    api_prefix: str = "/api"

    # CORS Settings
    cors_origins: list[str] = ["*"]  # Default to allow all in development
    cors_allow_credentials: bool = False

    # Database Settings
    DATABASE_URL: str = "sqlite:///data/tntsearch.db"
    DB_ECHO: bool = False

    # Catalog Settings
    CSV_PATH: str = "tntvillage-release-dump/tntvillage-release-dump.csv"
    INGEST_BATCH_SIZE: int = Field(default=1000, ge=1)
    PAGE_SIZE: int = Field(default=50, ge=1, le=500)

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=3000, ge=1, le=65535)

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",  # Allow extra fields in environment
    )

    @model_validator(mode="after")
    def validate_origins(self) -> "Settings":
        """Validate CORS origins."""
        if self.cors_origins == ["*"]:
            self.cors_origins = [
                "http://localhost",
                "http://localhost:3000",
                "http://localhost:8000",
            ]
        return self

    @model_validator(mode="after")
    def use_test_database_for_testing(self) -> "Settings":
        """Use the test database when running under the test suite."""
        import os

        if os.getenv("TESTING") == "true":
            test_database_url = os.getenv("TEST_DATABASE_URL")
            if test_database_url:
                self.DATABASE_URL = test_database_url
        return self


# Create settings instance
settings = Settings()


def get_settings() -> Settings:
    """Return the application settings (overridable as a FastAPI dependency)."""
    return settings
