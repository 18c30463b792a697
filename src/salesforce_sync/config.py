"""Application configuration via Pydantic BaseSettings."""

from __future__ import annotations

import json
from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    development = "development"
    staging = "staging"
    production = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Mapping definitions (*.mapping.xml): comma-separated or JSON list, searched in order
    MAPPING_PATHS: str = ""

    # Cache ClassMetadata per class name for the lifetime of the driver
    CACHE_METADATA: bool = False

    # Local store holding entities and the salesforce_mappings side table
    DATABASE_URL: str = "sqlite:///./salesforce_sync.db"

    # Environment
    ENVIRONMENT: Environment = Environment.development

    # Logging
    LOG_LEVEL: str = "INFO"

    def get_mapping_paths(self) -> list[str]:
        """Return MAPPING_PATHS as an ordered list of search roots."""
        value = self.MAPPING_PATHS.strip()
        if value.startswith("["):
            return [str(path) for path in json.loads(value)]
        return [part.strip() for part in value.split(",") if part.strip()]


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
