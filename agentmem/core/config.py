"""
Configuration Settings.

Settings are bound from environment variables and an optional ``.env`` file
by Pydantic's BaseSettings. Nested sections use a double underscore, so
``DATABASE__URL`` maps to ``settings.database.url`` and
``LOGFIRE__ENABLED`` to ``settings.logfire.enabled``.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Storage
# =====================================================================


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///./agentmem.db",
        description="Async SQLAlchemy connection URL for the memory store",
    )
    echo: bool = Field(default=False, description="Echo SQL statements emitted by the engine")


class MemoryConfig(BaseModel):
    """Query defaults for the memory repositories."""

    default_conversation_limit: int = Field(
        default=50, description="Page size used when listing conversations without a limit"
    )
    default_message_limit: int = Field(
        default=100, description="Size of the most-recent message window when no limit is given"
    )
    unfiltered_query_cap: int = Field(
        default=1000,
        description="Maximum number of most recent conversations considered by an unfiltered query",
    )


# =====================================================================
# Observability
# =====================================================================


class LoggingConfig(BaseModel):
    """Log output configuration; the level itself is ``AGENTMEM_LOG_LEVEL``."""

    format: Literal["simple", "detailed", "json"] = Field(default="detailed", description="Log line layout")
    enable_file: bool = Field(default=False, description="Also write every record to a log file")
    file_dir: str = Field(default="logs", description="Directory holding agentmem.log")


class LogfireConfig(BaseModel):
    """Pydantic Logfire tracing configuration."""

    enabled: bool = Field(default=False, description="Send traces to Logfire")
    token: Optional[str] = Field(default=None, description="Logfire write token")
    service_name: str = Field(default="agentmem", description="Service name reported with every span")
    service_version: str = Field(default="0.1.0", description="Service version reported with every span")
    environment: str = Field(default="development", description="Deployment environment tag")
    sample_rate: float = Field(default=1.0, ge=0.0, le=1.0, description="Head sampling rate for traces")
    trace_sqlalchemy: bool = Field(default=True, description="Instrument SQLAlchemy engines")


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are bound from environment variables and the .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    agentmem_log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig, description="Database configuration")
    memory: MemoryConfig = Field(default_factory=MemoryConfig, description="Memory query defaults")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Log output configuration")
    logfire: LogfireConfig = Field(default_factory=LogfireConfig, description="Logfire tracing configuration")


settings = Settings()
