"""
Configuration management using Pydantic Settings.
Loads settings from environment variables and .env files.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OracleSettings(BaseSettings):
    """Text-completion oracle configuration."""

    model_config = SettingsConfigDict(env_prefix="ORACLE_")

    base_url: str = Field(
        default="",
        description="Base URL of an OpenAI-compatible completion API (empty disables the oracle)",
    )
    api_key: str = Field(default="", description="Bearer token for the completion API")
    model: str = Field(default="gemini-2.5-flash", description="Model identifier")
    temperature: float = Field(default=0.2, description="Sampling temperature")
    timeout: float = Field(default=15.0, description="Timeout in seconds for a single oracle call")

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)


class ReadinessSettings(BaseSettings):
    """Readiness gating thresholds."""

    model_config = SettingsConfigDict(env_prefix="READINESS_")

    min_messages: int = Field(
        default=6,
        description="Messages required before the oracle is consulted (~3 round trips)",
    )
    fallback_messages: int = Field(
        default=8,
        description="Messages required to call a conversation ready when the oracle is unavailable",
    )


class TicketSettings(BaseSettings):
    """Ticket sink configuration."""

    model_config = SettingsConfigDict(env_prefix="TICKET_")

    api_url: str = Field(default="", description="Ticket creation endpoint (empty uses the mock sink)")
    api_key: str = Field(default="", description="Bearer token for the ticket API")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    mock_fallback: Optional[bool] = Field(
        default=None,
        description="Fall back to the mock sink when the ticket API fails (defaults to on in development)",
    )
    mock_base_url: str = Field(
        default="https://your-platform.com/tickets",
        description="Base URL used to build mock ticket links",
    )


class DeliverySettings(BaseSettings):
    """Outbound message delivery configuration."""

    model_config = SettingsConfigDict(env_prefix="DELIVERY_")

    webhook_url: str = Field(default="", description="Webhook receiving bot replies (empty disables delivery)")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    max_attempts: int = Field(default=3, description="Delivery attempts before giving up")


class ConversationSettings(BaseSettings):
    """Conversation store configuration."""

    model_config = SettingsConfigDict(env_prefix="CONVERSATION_")

    max_idle_minutes: int = Field(
        default=60, description="Idle minutes after which completed conversations are evicted"
    )
    cleanup_interval_seconds: int = Field(
        default=300, description="Seconds between eviction sweeps"
    )


class SecuritySettings(BaseSettings):
    """Security configuration."""

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    allowed_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="CORS allowed origins",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="intake-bot", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=True, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    bot_name: str = Field(default="Sapira", description="Name the bot introduces itself with")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")

    # Sub-settings
    oracle: OracleSettings = Field(default_factory=OracleSettings)
    readiness: ReadinessSettings = Field(default_factory=ReadinessSettings)
    ticket: TicketSettings = Field(default_factory=TicketSettings)
    delivery: DeliverySettings = Field(default_factory=DeliverySettings)
    conversation: ConversationSettings = Field(default_factory=ConversationSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = {"development", "staging", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"app_env must be one of {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def ticket_mock_fallback(self) -> bool:
        """Whether ticket submission may fall back to the mock sink."""
        if self.ticket.mock_fallback is None:
            return self.is_development
        return self.ticket.mock_fallback


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience function for accessing settings
settings = get_settings()
