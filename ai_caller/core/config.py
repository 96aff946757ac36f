"""
Configuration management for AI Caller
Uses Pydantic Settings for environment variable management
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = Field(default="AI Caller SaaS")
    app_description: str = Field(default="Build and deploy AI voice agents")
    app_url: str = Field(default="http://localhost:3000")
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Server Configuration
    server_host: str = Field(default="0.0.0.0")
    server_port: int = Field(default=8000)

    # OpenAI Configuration
    openai_api_key: Optional[str] = Field(default=None)
    openai_model: str = Field(default="gpt-4-turbo-preview")
    openai_timeout_seconds: float = Field(default=30.0)
    openai_max_retries: int = Field(default=0, ge=0)

    # Database Configuration
    database_url: str = Field(default="sqlite:///./data/ai_caller.db")
    database_echo: bool = Field(default=False)

    # Authentication
    secret_key: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expiration_hours: int = Field(default=24)

    # CORS Settings
    allowed_origins: str = Field(default="http://localhost:3000")

    # Voice overrides, applied once when the voice configuration is loaded
    max_response_latency_ms: int = Field(default=500)
    silence_threshold_ms: int = Field(default=800)
    max_call_duration_seconds: int = Field(default=1800)
    max_concurrent_calls: int = Field(default=10)
    default_voice: str = Field(default="rachel")
    default_voice_provider: str = Field(default="elevenlabs")
    price_per_minute: float = Field(default=0.12)

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
