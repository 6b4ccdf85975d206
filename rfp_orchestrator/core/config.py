"""Configuration management for the RFP Orchestrator."""

from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ===========================================
    # Backend Configuration
    # ===========================================
    BACKEND_API_URL: str = Field(
        default="http://localhost:8080",
        description="Base URL of the RFP/vendor backend"
    )
    BACKEND_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        gt=0,
        description="Bounded wait per backend call"
    )
    BACKEND_AUTH_TOKEN: str = Field(
        default="",
        description="Bearer credential sent with backend calls (empty = anonymous)"
    )

    # ===========================================
    # Server Configuration
    # ===========================================
    SERVICE_NAME: str = Field(default="rfp-orchestrator", description="Service name")
    DEBUG: bool = Field(default=True, description="Debug mode")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
