"""Application configuration using Pydantic Settings"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")
    base_url: str = Field(
        default="http://localhost:3000", description="Public URL used for the OAuth redirect"
    )
    frontend_url: str = Field(
        default="http://localhost:3000", description="Where the OAuth callback sends the browser"
    )

    # Storage
    data_dir: Path = Field(default=Path("data"), description="Directory for JSON documents")
    database_url: str = Field(
        default="", description="PostgreSQL URL; when set, documents are stored in Postgres"
    )

    # Outbound HTTP
    http_timeout: float = Field(default=10.0, description="Timeout for Google API calls")
    generation_timeout: float = Field(default=30.0, description="Timeout for the generation API")
    generation_model: str = Field(default="claude-haiku-4-5-20251001")
    generation_max_tokens: int = Field(default=600)

    # Credential defaults (the credentials document takes precedence)
    google_client_id: str = Field(default="", description="Google OAuth Client ID")
    google_client_secret: str = Field(default="", description="Google OAuth Client Secret")
    anthropic_api_key: str = Field(default="", description="Generation API key")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @property
    def redirect_uri(self) -> str:
        return f"{self.base_url.rstrip('/')}/auth/callback"

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS allowed origins"""
        return ["*"] if self.is_development else [self.frontend_url]

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
