"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="helpdesk-api", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=5000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/helpdesk",
        description="Database connection URL (async driver)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Credentials ==========
    jwt_secret: Optional[str] = Field(
        default=None,
        description="HS256 signing secret for bearer tokens (required at startup)"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_expires_days: int = Field(default=7, description="Token lifetime in days", ge=1)
    bcrypt_rounds: int = Field(
        default=12,
        description="bcrypt cost factor",
        ge=4,
        le=31
    )

    # ========== OpenAI (optional remote categorization) ==========
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key; categorization stays local when unset"
    )
    mock_llm: bool = Field(
        default=False,
        description="Use mock LLM responses for testing (no API calls)"
    )
    llm_model: str = Field(
        default="gpt-3.5-turbo",
        description="Chat model used for ticket categorization"
    )
    llm_temperature: float = Field(
        default=0.3,
        description="Default temperature for LLM",
        ge=0.0,
        le=1.0
    )
    llm_max_tokens: int = Field(
        default=200,
        description="Max tokens for the categorization reply",
        ge=1,
        le=4000
    )
    llm_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for the remote categorization call",
        ge=0.1,
        le=120
    )

    # ========== CORS ==========
    cors_origin: str = Field(
        default="http://localhost:3000",
        description="Allowed cross-origin address of the client application"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "test", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @property
    def llm_enabled(self) -> bool:
        """Whether categorization may be delegated to the remote model."""
        return bool(self.openai_api_key) or self.mock_llm


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# ========== Constants ==========

class Role(str):
    """User roles."""
    AGENT = "agent"
    ADMIN = "admin"


class TicketStatus(str):
    """Ticket lifecycle statuses."""
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Priority(str):
    """Ticket priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Category(str):
    """Ticket categories assigned by the categorizer."""
    TECHNICAL = "technical"
    BILLING = "billing"
    GENERAL = "general"
    FEATURE_REQUEST = "feature-request"
    BUG_REPORT = "bug-report"


# ========== Lists for validation ==========

VALID_ROLES = [Role.AGENT, Role.ADMIN]
VALID_STATUSES = [
    TicketStatus.OPEN, TicketStatus.IN_PROGRESS,
    TicketStatus.RESOLVED, TicketStatus.CLOSED
]
VALID_PRIORITIES = [Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.URGENT]
VALID_CATEGORIES = [
    Category.TECHNICAL, Category.BILLING, Category.GENERAL,
    Category.FEATURE_REQUEST, Category.BUG_REPORT
]
