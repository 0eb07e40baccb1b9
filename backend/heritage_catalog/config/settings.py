"""
Centralized Configuration System for the heritage catalog

Type-safe configuration built on Pydantic Settings.

Features:
- Environment variable binding with defaults
- One settings class per concern, aggregated by ApplicationSettings
- Test-friendly reload via reload_settings()
"""

import os
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> Optional[str]:
    return ".env" if not os.getenv("DOCKER_CONTAINER") else None


class Environment(str, Enum):
    """Application environment types"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class I18nSettings(BaseSettings):
    """Language whitelist configuration"""

    model_config = SettingsConfigDict(
        env_file=_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    supported_languages: List[str] = Field(
        default=["fr", "ar", "en", "tz-ltn", "tz-tfng"],
        description="Closed set of accepted language codes, most prevalent first"
    )
    default_language: str = Field(
        default="fr",
        description="Language assumed for bare strings and unknown codes"
    )
    secondary_language: str = Field(
        default="ar",
        description="Second entry of the extraction fallback chain"
    )

    # SUPPORTED_LANGUAGES is read from the environment as a JSON array.
    @field_validator("supported_languages")
    @classmethod
    def lowercase_languages(cls, v: List[str]) -> List[str]:
        cleaned: List[str] = []
        for code in v:
            code = code.strip().lower()
            if code and code not in cleaned:
                cleaned.append(code)
        if not cleaned:
            raise ValueError("supported_languages must not be empty")
        return cleaned

    @field_validator("default_language", "secondary_language")
    @classmethod
    def lowercase_code(cls, v: str) -> str:
        return v.strip().lower()

    @model_validator(mode="after")
    def check_members(self) -> "I18nSettings":
        for name in ("default_language", "secondary_language"):
            code = getattr(self, name)
            if code not in self.supported_languages:
                raise ValueError(f"{name} '{code}' is not in supported_languages")
        return self


class QuerySettings(BaseSettings):
    """Query fragment construction limits"""

    model_config = SettingsConfigDict(
        env_file=_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    search_term_max_length: int = Field(
        default=100,
        ge=1,
        description="Search terms are truncated to this many characters"
    )
    full_text_max_length: int = Field(
        default=100,
        ge=1,
        description="Full-text terms are truncated to this many characters"
    )
    identifier_max_length: int = Field(
        default=64,
        ge=1,
        le=64,
        description="Longest accepted table/field/alias name"
    )
    full_text_config: str = Field(
        default="simple",
        description="PostgreSQL text search configuration"
    )
    default_primary_key: str = Field(
        default="id",
        description="Primary key used when an order field is rejected"
    )


class DatabaseSettings(BaseSettings):
    """Database configuration settings"""

    model_config = SettingsConfigDict(
        env_file=_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    postgres_host: str = Field(
        default="localhost",
        description="PostgreSQL host"
    )
    postgres_port: int = Field(
        default=5432,
        description="PostgreSQL port"
    )
    postgres_user: str = Field(
        default="catalog",
        description="PostgreSQL username"
    )
    postgres_password: str = Field(
        default="catalog",
        description="PostgreSQL password"
    )
    postgres_db: str = Field(
        default="heritage",
        description="PostgreSQL database name"
    )
    pool_min_size: int = Field(
        default=1,
        description="Minimum asyncpg pool size"
    )
    pool_max_size: int = Field(
        default=5,
        description="Maximum asyncpg pool size"
    )
    command_timeout: int = Field(
        default=30,
        description="Statement timeout in seconds"
    )

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return f"postgresql://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"


class ApplicationSettings(BaseSettings):
    """Main application settings - aggregates all other settings"""

    model_config = SettingsConfigDict(
        env_file=_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    i18n: I18nSettings = Field(default_factory=I18nSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.environment == Environment.PRODUCTION

    @property
    def is_test(self) -> bool:
        """Check if running in test mode"""
        return self.environment == Environment.TEST


settings = ApplicationSettings()


def get_settings() -> ApplicationSettings:
    """
    Get the global settings instance

    Usable with FastAPI's Depends() for dependency injection.
    """
    return settings


def reload_settings() -> ApplicationSettings:
    """
    Reload settings from environment (useful for testing)
    """
    global settings
    settings = ApplicationSettings()
    return settings
