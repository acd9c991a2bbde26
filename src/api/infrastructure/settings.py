"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_NAME = "quickblog"


class MongoSettings(BaseSettings):
    """MongoDB connection settings.

    Environment variables:
        MONGODB_URI: Connection URI (default: mongodb://localhost:27017)
        MONGODB_DB_NAME: Logical database name (default: quickblog)
        MONGODB_SERVER_SELECTION_TIMEOUT_MS: Driver server selection timeout (default: 30000)
        MONGODB_APP_NAME: Client name reported to the server (default: quickblog-api)
    """

    model_config = SettingsConfigDict(
        env_prefix="MONGODB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    uri: SecretStr = Field(
        default=SecretStr("mongodb://localhost:27017"),
        description="MongoDB connection URI",
    )
    db_name: str = Field(
        default=DEFAULT_DATABASE_NAME,
        description="Logical database name",
    )
    server_selection_timeout_ms: int = Field(
        default=30000,
        description="How long the driver waits for a usable server",
        ge=1,
        le=600000,
    )
    app_name: str = Field(
        default="quickblog-api",
        description="Client application name",
    )

    @field_validator("db_name", mode="before")
    @classmethod
    def default_blank_db_name(cls, value: object) -> object:
        """Treat an empty database name as unset."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_DATABASE_NAME
        return value

    @property
    def hosts(self) -> str:
        """Host list from the URI, without scheme, credentials or options."""
        uri = self.uri.get_secret_value()
        netloc = uri.split("://", 1)[-1].split("/", 1)[0].split("?", 1)[0]
        return netloc.rsplit("@", 1)[-1]


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Quickblog API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def mongo(self) -> MongoSettings:
        """Get MongoDB settings."""
        return get_mongo_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_mongo_settings() -> MongoSettings:
    """Get cached MongoDB settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return MongoSettings()
