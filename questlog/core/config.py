"""Configuration management for questlog."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Configuration
    storage_backend: Literal["sqlite", "redis", "memory"] = Field(
        default="sqlite", description="Key-value backend used to persist collections"
    )
    sqlite_db_path: str = Field(default="questlog.db", description="SQLite database file for on-device storage")
    redis_url: str | None = Field(default=None, description="Redis connection URL (e.g., redis://localhost:6379)")

    # Persisted collection keys
    tasks_storage_key: str = Field(default="@tasks", description="Storage key holding the task collection")
    partners_storage_key: str = Field(default="@partners", description="Storage key holding the partner collection")
    task_lists_storage_key: str = Field(
        default="@task_lists", description="Storage key holding the task-list collection"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    # Naming skin and single-user identity
    skin: Literal["task", "quest"] = Field(
        default="task", description="Naming skin: 'task' (partners) or 'quest' (allies)"
    )
    current_user_id: str = Field(default="current-user", description="Placeholder id stamped as task creator")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required setting is present, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The configured value

        Raises:
            ValueError: If the value is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # Redis Configuration
    REDIS_MAX_CONNECTIONS: int = 10  # Maximum connections in Redis connection pool

    # SQLite key-value table
    SQLITE_KV_TABLE: str = "kv_store"

    # Quest rewards by difficulty
    DIFFICULTY_XP: dict[str, int] = {"easy": 10, "medium": 25, "hard": 50, "legendary": 100}
    SUB_QUEST_XP: dict[str, int] = {"easy": 5, "medium": 10, "hard": 20, "legendary": 30}
    DEFAULT_DIFFICULTY_XP: int = 25
    DEFAULT_SUB_QUEST_XP: int = 10

    # Display name for partner ids that no longer resolve
    UNKNOWN_PARTNER_NAME: str = "Unknown"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
