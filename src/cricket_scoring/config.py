"""Configuration management for the live scoring engine."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    url: str = Field(default="sqlite:///cricket_scoring.db", validation_alias="DB_URL")
    echo: bool = Field(default=False, validation_alias="DB_ECHO")


class ScoringSettings(BaseSettings):
    """Scoring engine configuration settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    default_total_overs: int = Field(default=20, ge=1, validation_alias="DEFAULT_TOTAL_OVERS")
    home_team_name: str = Field(default="Home XI", validation_alias="HOME_TEAM_NAME")

    # None keeps every snapshot for the lifetime of the session
    history_max_depth: Optional[int] = Field(default=None, ge=1, validation_alias="HISTORY_MAX_DEPTH")


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    file: Optional[str] = Field(default=None, validation_alias="LOG_FILE")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance
settings = Settings()
